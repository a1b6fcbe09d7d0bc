"""Runtime settings read from the environment."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_DATA_DIR = Path(__file__).parent.parent / "data"


class Settings(BaseSettings):
    """Application settings, overridable through PREAUTH_* environment variables."""

    rules_path: Path = Field(default=_DATA_DIR / "sa_orthopedics_rules.json", description="Payer rule document")
    summary_model: str = Field(default="gpt-4o-mini", description="Chat model used for SOAP summaries")
    llm_timeout: int = Field(default=20, gt=0, description="Model request timeout in seconds")
    llm_max_retries: int = Field(default=3, ge=0, description="Model client retry count")
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
        description="Key for the summarization service",
    )
    minutes_saved_per_request: int = Field(default=15, ge=0, description="Reporting baseline per request")
    org_id: str = Field(default="demo-org", description="Organization that owns new requests")
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_prefix="PREAUTH_", env_ignore_empty=True, extra="ignore")

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v):
        return v.strip().upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
