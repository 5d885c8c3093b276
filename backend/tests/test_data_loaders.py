"""Tests for document helpers and the metadata CSV loader."""

import shutil
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from movierec.data.documents import (
    Document, backdrop_url, build_tags, normalize_text, poster_url, tokenize
)
from movierec.data.loaders import MovieCSVLoader
from movierec.service.config import config

class TestDocumentHelpers:
    """Test tag normalization and image URLs."""

    def test_normalize_text(self):
        """Test lower-casing and punctuation stripping."""
        assert normalize_text("Spider-Man 2: Hero's Return!") == "spiderman  heros return"
        assert normalize_text(None) == ""
        assert normalize_text("  ") == ""

    def test_build_tags_order_and_normalization(self):
        """Test title, overview, genres and tagline concatenation."""
        tags = build_tags("Avatar", "A marine on Pandora.", ["Action", "Science Fiction"], "Enter the World")
        assert tags == "avatar a marine on pandora action science fiction enter the world"

    def test_build_tags_missing_fields(self):
        """Test that missing parts do not leave stray tokens."""
        assert tokenize(build_tags("Heat", None, [], None)) == ["heat"]

    def test_tokenize(self):
        """Test whitespace tokenization."""
        assert tokenize("space  alien\twar") == ["space", "alien", "war"]
        assert tokenize("") == []

    def test_poster_url(self):
        """Test poster path resolution."""
        assert poster_url("/abc.jpg") == f"{config.POSTER_BASE_URL}/abc.jpg"
        assert poster_url("abc.jpg") == f"{config.POSTER_BASE_URL}/abc.jpg"
        assert poster_url("http://img/x.jpg") == "http://img/x.jpg"
        assert poster_url(None) == config.POSTER_PLACEHOLDER
        assert poster_url("") == config.POSTER_PLACEHOLDER

    def test_backdrop_url(self):
        """Test backdrop path resolution."""
        assert backdrop_url("/b.jpg") == f"{config.BACKDROP_BASE_URL}/b.jpg"
        assert backdrop_url(None) is None

    def test_document_from_dict(self):
        """Test building documents from loose dicts."""
        doc = Document.from_dict({'id': '42', 'title': 'X', 'tags': 'x', 'genres': None, 'extra': 1})
        assert doc.id == 42
        assert doc.genres == []
        assert doc.to_dict()['title'] == 'X'

class TestMovieCSVLoader:
    """Test TMDB metadata ingestion."""

    @pytest.fixture
    def sample_rows(self):
        return pd.DataFrame({
            'id': ['862', '8844', '1997-08-20', '15602', '862', '31357'],
            'title': ['Toy Story', 'Jumanji', 'Broken', '', 'Toy Story', 'Waiting to Exhale'],
            'original_title': ['Toy Story', 'Jumanji', 'Broken', 'Grumpier Old Men', 'Toy Story', ''],
            'overview': ["Led by Woody, Andy's toys live happily.", 'When siblings Judy and Peter discover a board game.',
                         'x', 'A family wedding reignites a feud.', 'dup', ''],
            'genres': ["[{'id': 16, 'name': 'Animation'}, {'id': 35, 'name': 'Comedy'}]",
                       "[{'id': 12, 'name': 'Adventure'}]",
                       '[]',
                       'not a list',
                       '[]',
                       "[{'id': 18, 'name': 'Drama'}]"],
            'tagline': ['', 'Roll the dice and unleash the excitement!', '', '', '', 'Friends are the people.'],
            'poster_path': ['/rhIRbceoE9lR4veEXuwCC2wARtG.jpg', '', '', '/6ksm.jpg', '', ''],
            'release_date': ['1995-10-30', '1995-12-15', '', '1995-12-22', '', '1995-12-22'],
            'vote_average': ['7.7', '6.9', '', 'bad', '', '6.1'],
            'vote_count': ['5415.0', '2413', '', '92', '', '34'],
        })

    @pytest.fixture
    def temp_dir(self):
        """Create temporary directory for testing."""
        temp_dir = tempfile.mkdtemp()
        yield temp_dir
        shutil.rmtree(temp_dir)

    def test_parse_genres(self):
        """Test Python-literal genre lists."""
        assert MovieCSVLoader.parse_genres("[{'id': 16, 'name': 'Animation'}]") == ['Animation']
        assert MovieCSVLoader.parse_genres('[]') == []
        assert MovieCSVLoader.parse_genres('garbage{') == []
        assert MovieCSVLoader.parse_genres(None) == []

    def test_parse_numbers(self):
        """Test lenient numeric parsing."""
        assert MovieCSVLoader.parse_int('42') == 42
        assert MovieCSVLoader.parse_int('5415.0') == 5415
        assert MovieCSVLoader.parse_int('1997-08-20') is None
        assert MovieCSVLoader.parse_int('') is None
        assert MovieCSVLoader.parse_float('7.7') == pytest.approx(7.7)
        assert MovieCSVLoader.parse_float('nan') is None
        assert MovieCSVLoader.parse_float('') is None

    def test_from_dataframe(self, sample_rows):
        """Test row conversion and skipping."""
        documents = MovieCSVLoader(max_movies=100).from_dataframe(sample_rows)
        ids = [d.id for d in documents]

        # Bad id skipped; duplicates are left to the store
        assert ids == [862, 8844, 15602, 862, 31357]

        toy_story = documents[0]
        assert toy_story.genres == ['Animation', 'Comedy']
        assert toy_story.tags == "toy story led by woody andys toys live happily animation comedy"
        assert toy_story.vote_average == pytest.approx(7.7)
        assert toy_story.vote_count == 5415
        assert toy_story.poster_path == '/rhIRbceoE9lR4veEXuwCC2wARtG.jpg'

        grumpier = documents[2]
        assert grumpier.title == 'Grumpier Old Men'
        assert grumpier.genres == []
        assert grumpier.vote_average == 0.0

        jumanji = documents[1]
        assert jumanji.poster_path is None
        assert jumanji.tags.endswith("adventure roll the dice and unleash the excitement")

    def test_max_movies(self, sample_rows):
        """Test the ingestion cap."""
        documents = MovieCSVLoader(max_movies=2).from_dataframe(sample_rows)
        assert [d.id for d in documents] == [862, 8844]

    def test_load_csv(self, sample_rows, temp_dir):
        """Test loading from disk."""
        path = Path(temp_dir) / "movies_metadata.csv"
        sample_rows.to_csv(path, index=False)

        documents = MovieCSVLoader(max_movies=100).load(str(path))

        assert len(documents) == 5
        assert documents[1].title == 'Jumanji'

    def test_load_missing_file(self, temp_dir):
        """Test error for a missing CSV."""
        with pytest.raises(FileNotFoundError):
            MovieCSVLoader().load(str(Path(temp_dir) / "missing.csv"))
