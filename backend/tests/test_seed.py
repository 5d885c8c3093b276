"""Tests for the corpus seeding job."""

import shutil
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from movierec.data.store import InMemoryCorpusStore
from movierec.pipeline.engine import RecommendationEngine
from movierec.scripts.seed import seed

@pytest.fixture
def temp_dir():
    """Create temporary directory for testing."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)

def test_seed_builds_searchable_corpus(temp_dir):
    """Test CSV to Parquet corpus, with duplicates skipped."""
    csv_path = Path(temp_dir) / "movies_metadata.csv"
    out_path = Path(temp_dir) / "corpus" / "corpus.parquet"
    pd.DataFrame({
        'id': ['19995', '76600', '19995', '597'],
        'title': ['Avatar', 'Avatar: The Way of Water', 'Avatar', 'Titanic'],
        'overview': ['A marine on Pandora.', 'Jake Sully lives with his family on Pandora.', '', 'A ship sinks.'],
        'genres': ["[{'id': 28, 'name': 'Action'}]", '[]', '[]', "[{'id': 18, 'name': 'Drama'}]"],
        'tagline': ['', '', '', ''],
        'poster_path': ['/a.jpg', '', '', ''],
        'release_date': ['2009-12-10', '2022-12-14', '', '1997-11-18'],
        'vote_average': ['7.2', '7.7', '', '7.5'],
        'vote_count': ['11800', '5000', '', '7770'],
    }).to_csv(csv_path, index=False)

    store = seed(str(csv_path), str(out_path), max_movies=100)

    assert store.count() == 3
    assert out_path.exists()

    loaded = InMemoryCorpusStore.load(str(out_path))
    target = loaded.find_by_title_exact("avatar")
    results = RecommendationEngine(loaded).recommend(target)

    assert [r.id for r in results] == [76600]
