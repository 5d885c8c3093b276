"""Configuration settings for the movie recommendation service."""

import os
from dataclasses import dataclass

@dataclass
class Config:
    """Main configuration class."""

    # Data paths
    DATA_DIR: str = "dataset"
    CORPUS_PATH: str = "dataset/corpus.parquet"
    SEED_CSV: str = "dataset/movies_metadata.csv"
    SEED_MAX_MOVIES: int = 50000

    # Candidate retrieval
    CANDIDATE_LIMIT: int = 500
    RETRIEVAL_TIMEOUT_S: float = 5.0

    # Ranking
    TOP_N: int = 15
    TFIDF_STOP_WORDS: str = ""  # "" keeps every token, "english" drops stop words

    # TMDB metadata API
    TMDB_API_KEY: str = ""
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_TIMEOUT_S: float = 10.0
    TMDB_RETRIES: int = 3
    TMDB_RETRY_DELAY_S: float = 1.0
    SIMILAR_FALLBACK_LIMIT: int = 12

    # Images
    POSTER_BASE_URL: str = "https://image.tmdb.org/t/p/w500"
    BACKDROP_BASE_URL: str = "https://image.tmdb.org/t/p/w1280"
    POSTER_PLACEHOLDER: str = "https://via.placeholder.com/500x750?text=No+Poster"

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_TTL: int = 3600  # 1 hour

    # API settings
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 5000

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def tfidf_stop_words(self):
        """Stop-word setting in the form the vectorizer expects."""
        return self.TFIDF_STOP_WORDS or None

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        config = cls()

        # Override with environment variables
        for field in config.__dataclass_fields__:
            env_var = f"MOVIEREC_{field}"
            if env_var in os.environ:
                value = os.environ[env_var]
                # Convert to the type of the default
                field_type = type(getattr(config, field))
                if field_type == bool:
                    setattr(config, field, value.lower() == "true")
                elif field_type == int:
                    setattr(config, field, int(value))
                elif field_type == float:
                    setattr(config, field, float(value))
                else:
                    setattr(config, field, value)

        return config

# Global config instance
config = Config.from_env()
