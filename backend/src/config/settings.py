"""
Application settings and configuration management.
All values should come from environment variables for production safety.
"""
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings - all values from environment variables."""

    # League service settings (remote CRUD backend)
    league_api_base_url: str = "http://localhost:8080"
    league_api_token: str = ""
    api_request_timeout: float = 30.0
    max_retries: int = 3
    api_user_agent: str = "RecLeague/0.1.0"

    # Redis settings
    redis_url: str = "redis://localhost:6379/0"
    redis_password: Optional[str] = None
    redis_db: int = 0
    redis_max_connections: int = 10
    cache_enabled: bool = False
    cache_ttl: int = 3600  # Cache time-to-live in seconds

    # Game status heuristics
    stale_game_threshold_minutes: int = 120

    # Box score synthesis
    league_average_score: float = 94.0
    scoring_variance: int = 4
    half_split_min: float = 0.45
    half_split_max: float = 0.55

    # Homepage slices
    recent_games_limit: int = 3
    upcoming_games_limit: int = 5

    # Logging settings
    log_level: str = "INFO"

    @property
    def redis_connection_kwargs(self) -> Dict[str, Any]:
        """Get Redis connection parameters."""
        parsed = urlparse(self.redis_url)
        db = parsed.path.lstrip('/')
        return {
            'host': parsed.hostname or 'localhost',
            'port': parsed.port or 6379,
            'db': int(db) if db.isdigit() else self.redis_db,
            'password': parsed.password or self.redis_password,
            'max_connections': self.redis_max_connections,
            'decode_responses': False
        }

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
