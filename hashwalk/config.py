"""Configuration management with Pydantic settings."""

import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hashwalk.scan.pipeline import default_workers
from hashwalk.utils.hashing import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE, validate_algorithm
from hashwalk.utils.paths import SymlinkPolicy

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_default_root() -> Path:
    """Return ``$GOPATH`` when set, otherwise the current directory."""
    gopath = os.getenv("GOPATH")
    if gopath:
        return Path(os.path.expandvars(gopath))
    return Path.cwd()


class Settings(BaseSettings):
    """hashwalk configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="HASHWALK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    root: Path | None = Field(
        default=None,
        description="Directory to fingerprint (defaults to $GOPATH, then the current directory)",
    )

    output_dir: Path | None = Field(
        default=None,
        description="Directory receiving result artifacts (defaults to the current directory)",
    )

    workers: int | None = Field(
        default=None,
        ge=1,
        description="Parallel hashing workers and queue capacity (defaults to CPU count)",
    )

    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        ge=1,
        description="Bytes read per chunk while hashing",
    )

    algorithm: str = Field(
        default=DEFAULT_ALGORITHM,
        description="hashlib algorithm used for fingerprints",
    )

    symlinks: SymlinkPolicy = Field(
        default="skip",
        description="Symlink policy: skip, follow (files only) or error",
    )

    timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Cancel the parallel strategy after this many seconds",
    )

    single_artifact_name: str = Field(
        default="result_single.json",
        description="Artifact file name for the sequential strategy",
    )

    parallel_artifact_name: str = Field(
        default="result_parallels.json",
        description="Artifact file name for the parallel strategy",
    )

    log_level: str = Field(
        default="WARNING",
        description="Root logger level for the CLI",
    )

    @field_validator("algorithm")
    @classmethod
    def _validate_algorithm(cls, value: str) -> str:
        return validate_algorithm(value.lower())

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    def get_root(self) -> Path:
        """Get the root directory to traverse."""
        return self.root if self.root is not None else get_default_root()

    def get_output_dir(self) -> Path:
        """Get the artifact directory, creating if necessary."""
        output_dir = self.output_dir if self.output_dir is not None else Path.cwd()
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir

    def get_workers(self) -> int:
        """Get the parallel concurrency degree."""
        if self.workers is not None:
            return self.workers
        return default_workers()

    def get_single_artifact_path(self) -> Path:
        return self.get_output_dir() / self.single_artifact_name

    def get_parallel_artifact_path(self) -> Path:
        return self.get_output_dir() / self.parallel_artifact_name


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
