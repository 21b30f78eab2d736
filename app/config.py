"""
MoveReady Configuration — pydantic-settings based.

All settings are read from environment variables or .env file.
Every value has a default so the service starts with no configuration.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

_PACKAGE_ROOT = Path(__file__).resolve().parent
_REPO_ROOT = _PACKAGE_ROOT.parent


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── Rules ──
    rules_dir: Path = Field(
        default=_PACKAGE_ROOT / "rules",
        description="Directory holding the JSON rule files",
    )

    # ── Diagnostics ──
    matrix_csv_path: Path = Field(
        default=_REPO_ROOT / "azure-move-matrix.csv",
        description="Reference move-support matrix (semicolon separated)",
    )
    link_check_timeout: float = Field(
        default=5.0, description="Timeout per reference-link request in seconds"
    )
    link_check_chunk_size: int = Field(
        default=20, ge=1, description="Reference links checked concurrently per batch"
    )

    # ── Server ──
    port: int = Field(default=8080, description="Server port")
    host: str = Field(default="0.0.0.0", description="Server bind host")
    cors_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )
    log_level: str = Field(default="INFO", description="Root log level")

    # ── Audit ──
    audit_log_path: str = Field(
        default="audit.jsonl", description="Path to JSON-lines audit log file"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance — imported by other modules
settings = Settings()
