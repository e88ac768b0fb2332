"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from draftflow.models.requirements import (
    DEFAULT_RECOMMENDATION_WEIGHTS,
    DEFAULT_REQUIREMENT_TOGGLES,
    DEFAULT_TREE_SETTINGS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Only the HTTP layer reads these; engine functions take every toggle,
    weight and limit as an explicit argument.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DRAFTFLOW_",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS - comma-separated origins (env var: DRAFTFLOW_CORS_ORIGINS)
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Composition defaults (JSON objects when set through the environment)
    default_requirement_toggles: dict[str, bool] = Field(
        default_factory=lambda: dict(DEFAULT_REQUIREMENT_TOGGLES)
    )
    default_weights: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_RECOMMENDATION_WEIGHTS)
    )

    # Tree search defaults
    default_max_depth: int = DEFAULT_TREE_SETTINGS["max_depth"]
    default_max_branch: int = DEFAULT_TREE_SETTINGS["max_branch"]
    default_min_candidate_score: float = DEFAULT_TREE_SETTINGS["min_candidate_score"]
    relative_score_ratio: float = DEFAULT_TREE_SETTINGS["relative_score_ratio"]

    # Requests whose worst-case node count exceeds this are rejected by the API
    max_tree_nodes_hint: int = 200_000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
