"""Pydantic settings models for docsift configuration.

Two settings classes load from separate YAML config files with environment
variable override support. Source priority (highest to lowest):

    1. Environment variables (with prefix, e.g., EXTRACTION_MAX_PAGES)
    2. .env file
    3. YAML config file (e.g., config/extraction.yaml)
    4. Default values defined here

Config paths are resolved relative to PROJECT_ROOT so the application works
regardless of the current working directory.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

# Resolve project root: settings.py -> config/ -> docsift/ -> src/ -> repo root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

_CONFIG_DIR = PROJECT_ROOT / "config"
_ENV_FILE = PROJECT_ROOT / ".env"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class _YamlSettings(BaseSettings):
    """Base class wiring the YAML source below env and .env overrides."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


class ExtractionSettings(_YamlSettings):
    """Content classification, rasterization limits and OCR engine setup."""

    # Image-only PDFs: hand back rendered pages or OCR them inline
    on_image_only: Literal["return_paths", "run_ocr"] = "return_paths"
    text_probe: Literal["filter", "operators"] = "filter"
    scratch_dir: str = "data/scratch"

    image_extensions: list[str] = [".jpeg", ".jpg", ".gif", ".png"]

    # Resource guards, enforced as hard failures
    max_pages: int = Field(default=500, gt=0)
    max_pixel_dimension: int = Field(default=10_000, gt=0)

    # Tesseract
    ocr_language: str = "eng"
    tessdata_dir: str | None = None
    tesseract_cmd: str = "tesseract"
    tesseract_config: str = ""

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "extraction.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="EXTRACTION_",
        extra="ignore",
    )

    @field_validator("image_extensions")
    @classmethod
    def _normalise_extensions(cls, value: list[str]) -> list[str]:
        return ["." + ext.lower().lstrip(".") for ext in value]

    def scratch_path(self) -> Path:
        """Scratch root as an absolute path (relative values hang off PROJECT_ROOT)."""
        path = Path(self.scratch_dir)
        return path if path.is_absolute() else PROJECT_ROOT / path


class PipelineSettings(_YamlSettings):
    """Pipeline operations: logging and source download limits."""

    log_dir: str = "logs"
    log_max_bytes: int = 10_485_760  # 10MB
    log_backup_count: int = 5
    log_level_file: LogLevel = "DEBUG"
    log_level_console: LogLevel = "INFO"

    download_timeout_seconds: float = 60.0
    download_chunk_size: int = 65_536
    max_source_bytes: int = 104_857_600  # 100MB
    user_agent: str = "docsift/0.1"

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "pipeline.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="PIPELINE_",
        extra="ignore",
    )
