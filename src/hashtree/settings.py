from __future__ import annotations
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", alias="HASHTREE_LOG_LEVEL")

    # Upper bound on leaves the CLI will read from one source
    max_leaves: int = Field(default=1048576, alias="HASHTREE_MAX_LEAVES")

    proof_indent: int = Field(default=2, alias="HASHTREE_PROOF_INDENT")

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()  # load at import
