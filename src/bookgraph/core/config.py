"""
Runtime settings for bookgraph.

Every field can be set from the environment with a BOOKGRAPH_ prefix
(BOOKGRAPH_LLM_API_KEY, BOOKGRAPH_GRAPH_MAX_DEGREE, ...) or from a local
.env file. The CLI, the API and the scoring client all read the same
cached instance.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Bookgraph settings, loaded once per process."""

    model_config = SettingsConfigDict(
        env_prefix="BOOKGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Service
    # ==========================================================================
    app_name: str = "Bookgraph API"
    app_version: str = "1.0.0"
    environment: str = Field(default="development", description="development, staging, production")
    debug: bool = False
    log_level: str = Field(default="INFO", description="Root log level for the CLI and server")

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api/v1"
    api_docs_url: str = "/docs"
    api_redoc_url: str = "/redoc"

    # Front-end dev servers; set BOOKGRAPH_CORS_ORIGINS='["*"]' to open up
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # ==========================================================================
    # Sentiment Scoring (OpenAI-compatible chat completions)
    # ==========================================================================
    llm_api_key: Optional[str] = Field(
        default=None,
        description="API key for the sentiment scoring model",
    )
    llm_base_url: str = "https://api.openai.com/v1"
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    llm_timeout: float = Field(default=30.0, gt=0)
    llm_requests_per_minute: int = Field(default=120, ge=1)
    scoring_batch_size: int = Field(default=5, ge=1, le=50)
    score_cache_ttl: int = Field(default=3600, description="Seconds a category's scores stay cached")

    # ==========================================================================
    # Graph Construction
    # ==========================================================================
    graph_max_degree: int = Field(default=3, ge=1, description="Degree cap during greedy selection")
    graph_edges_per_node: float = Field(default=1.5, gt=0, description="Target average edges per node")
    graph_keep_ratio: float = Field(default=0.7, gt=0, le=1, description="Share of selected edges kept")
    category_link_threshold: float = Field(default=0.4, ge=0, le=1)

    @computed_field
    @property
    def llm_configured(self) -> bool:
        """Whether a scoring model can be called."""
        return bool(self.llm_api_key)


@lru_cache
def get_settings() -> Settings:
    """Settings for this process, read from the environment on first call."""
    return Settings()
