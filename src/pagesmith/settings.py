"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagesmith.exceptions import SettingsError
from pagesmith.typing.enums import CompressionLevel, Orientation, PageSizeName, RasterFormat

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "pagesmith"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    max_workers: int = Field(
        default=1,
        ge=1,
        validation_alias="MAX_WORKERS",
        description="Worker processes used for page-level work. 1 runs everything in-process.",
    )

    default_dpi: int = Field(
        default=150,
        gt=0,
        validation_alias="DEFAULT_DPI",
        description="Rasterization resolution used when none is requested.",
    )
    default_quality: int = Field(
        default=90,
        ge=1,
        le=100,
        validation_alias="DEFAULT_QUALITY",
        description="Lossy encoder quality used when none is requested.",
    )
    default_raster_format: RasterFormat = Field(
        default=RasterFormat.PNG,
        validation_alias="DEFAULT_RASTER_FORMAT",
        description="Image format used for rasterized pages.",
    )
    default_page_size: PageSizeName = Field(
        default=PageSizeName.A4,
        validation_alias="DEFAULT_PAGE_SIZE",
        description="Page size used when converting images.",
    )
    default_orientation: Orientation = Field(
        default=Orientation.PORTRAIT,
        validation_alias="DEFAULT_ORIENTATION",
        description="Page orientation used when converting images.",
    )
    default_margin_mm: float = Field(
        default=10.0,
        ge=0.0,
        validation_alias="DEFAULT_MARGIN_MM",
        description="Page margin in millimetres used when converting images.",
    )
    default_compression: CompressionLevel = Field(
        default=CompressionLevel.MEDIUM,
        validation_alias="DEFAULT_COMPRESSION",
        description="Save-time compression hint for assembled documents.",
    )

    max_file_size_mb: int = Field(
        default=50,
        gt=0,
        validation_alias="MAX_FILE_SIZE_MB",
        description="Per-file size ceiling enforced at intake.",
    )
    max_files_per_batch: int = Field(
        default=10,
        gt=0,
        validation_alias="MAX_FILES_PER_BATCH",
        description="Maximum number of files accepted in one batch.",
    )

    results_dir: str = Field(
        default="results",
        validation_alias="RESULTS_DIR",
        description="Directory where the CLI writes its outputs.",
    )

    @property
    def max_file_size_bytes(self) -> int:
        """Return the per-file ceiling in bytes."""
        return self.max_file_size_mb * 1024 * 1024


def _load_settings() -> Settings:
    """Instantiate settings, wrapping any failure.

    Raises:
        SettingsError: If values are missing or invalid.

    Returns:
        Settings: Fresh settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        raise SettingsError(exc=exc) from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings.

    When required values are missing and a `.env.template` is available, the
    template is copied to `.env` and loading is attempted once more.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The cached settings instance.
    """
    try:
        return _load_settings()
    except SettingsError as error:
        if not _is_missing_settings_error(error.exc) or not ensure_env_file_exists():
            raise
    return _load_settings()


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> bool:
    """Seed `.env` from its template when it does not exist yet.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.

    Returns:
        bool: True when the file was created.
    """
    if env_path.exists() or not template_path.exists():
        return False
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info("Seeded %s from %s", env_path, template_path)
    return True


def _is_missing_settings_error(exc: BaseException | None) -> bool:
    """Tell whether a load failure only lacks required values."""
    return isinstance(exc, ValidationError) and any(error.get("type") == "missing" for error in exc.errors())
