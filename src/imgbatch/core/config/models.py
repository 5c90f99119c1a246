"""
Configuration Models

Pydantic models for type-safe configuration management with validation,
defaults, and field documentation.
"""

from pathlib import Path
from pydantic import BaseModel, Field, field_validator

from imgbatch.processing.archive import ARCHIVE_NAME
from imgbatch.processing.formats import ImageFormat


class ConversionConfig(BaseModel):
    """Configuration for image conversion runs."""

    target_format: str = Field(
        default="png",
        description="Target image format (png, jpeg, webp; jpg is accepted as jpeg)"
    )
    max_workers: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Maximum worker threads for per-image conversion"
    )

    @field_validator('target_format')
    @classmethod
    def validate_target_format(cls, v):
        """Validate and normalize the target format."""
        return ImageFormat.parse(v).value

    @property
    def image_format(self) -> ImageFormat:
        return ImageFormat(self.target_format)


class OutputConfig(BaseModel):
    """Configuration for where converted images are written."""

    output_dir: Path = Field(
        default=Path("converted"),
        description="Directory receiving converted files and the archive"
    )
    archive_name: str = Field(
        default=ARCHIVE_NAME,
        description="File name of the bulk download archive"
    )
    write_archive: bool = Field(
        default=True,
        description="Write all converted images into a single ZIP archive"
    )
    write_individual: bool = Field(
        default=False,
        description="Write each converted image as a separate file"
    )
    overwrite: bool = Field(
        default=False,
        description="Overwrite existing files instead of choosing a new name"
    )

    @field_validator('archive_name')
    @classmethod
    def validate_archive_name(cls, v):
        """Archive name must be a bare .zip file name."""
        v = v.strip()
        if not v.lower().endswith('.zip'):
            raise ValueError(f"Archive name must end in .zip: {v}")
        if '/' in v or '\\' in v:
            raise ValueError(f"Archive name must not contain a path: {v}")
        return v


class AppConfig(BaseModel):
    """Root application configuration model."""

    conversion: ConversionConfig = Field(default_factory=ConversionConfig, description="Conversion configuration")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output configuration")

    dry_run: bool = Field(
        default=False,
        description="Classify inputs and report without converting"
    )
    verbose: bool = Field(
        default=False,
        description="Enable verbose logging output"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with detailed logging"
    )
