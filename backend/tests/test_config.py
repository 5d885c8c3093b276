"""Tests for configuration loading."""

from movierec.service.config import Config

class TestConfig:
    """Test defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        """Test reference defaults."""
        for field in Config.__dataclass_fields__:
            monkeypatch.delenv(f"MOVIEREC_{field}", raising=False)
        config = Config.from_env()

        assert config.CANDIDATE_LIMIT == 500
        assert config.TOP_N == 15
        assert config.TMDB_RETRIES == 3
        assert config.SIMILAR_FALLBACK_LIMIT == 12
        assert config.tfidf_stop_words is None

    def test_env_overrides(self, monkeypatch):
        """Test typed overrides from MOVIEREC_* variables."""
        monkeypatch.setenv("MOVIEREC_TOP_N", "5")
        monkeypatch.setenv("MOVIEREC_RETRIEVAL_TIMEOUT_S", "0.5")
        monkeypatch.setenv("MOVIEREC_TFIDF_STOP_WORDS", "english")
        monkeypatch.setenv("MOVIEREC_LOG_LEVEL", "DEBUG")

        config = Config.from_env()

        assert config.TOP_N == 5
        assert config.RETRIEVAL_TIMEOUT_S == 0.5
        assert config.tfidf_stop_words == "english"
        assert config.LOG_LEVEL == "DEBUG"
