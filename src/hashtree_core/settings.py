from __future__ import annotations
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", alias="HASHTREE_LOG_LEVEL")

    # Number of digest bytes shown per node in the diagnostic dump
    dump_hash_bytes: int = Field(default=8, alias="HASHTREE_DUMP_HASH_BYTES")

    # Shorten full-length hex digests in log records
    log_truncate_hex: bool = Field(default=False, alias="HASHTREE_LOG_TRUNCATE_HEX")

    # Upper bound on a single block read by the CLI (bytes)
    max_cli_block_bytes: int = Field(
        default=64 * 1024 * 1024, alias="HASHTREE_MAX_CLI_BLOCK_BYTES"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()  # load at import
