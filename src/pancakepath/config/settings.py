"""Configuration settings for PancakePath."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

# Batter shades from lightest to darkest. Later entries cook longer on the
# griddle and come out darker, so they double as outline colors.
PANCAKE_SHADES: list[str] = [
    "#ffea7e",
    "#e2bc15",
    "#a6720e",
    "#714a00",
]


class OffsetConfig(BaseModel):
    """Configuration for polygon offsetting and boolean operations.

    Clipping runs in a fixed-point integer space; ``scale`` converts drawing
    units into that space.
    """

    scale: int = Field(
        default=100,
        ge=1,
        le=100_000,
        description="Fixed-point scale factor applied before clipping",
    )
    clean_delta: float = Field(
        default=0.1,
        ge=0.0,
        le=10.0,
        description="Points closer than this (drawing units) are merged before offsetting",
    )
    miter_limit: float = Field(
        default=2.0,
        ge=1.0,
        le=10.0,
        description="Miter limit passed to the offset engine",
    )
    arc_tolerance: float = Field(
        default=0.25,
        gt=0.0,
        le=100.0,
        description="Arc tolerance for round joins (fixed-point units)",
    )
    boolean_resolution: float = Field(
        default=0.25,
        gt=0.0,
        le=10.0,
        description="Flatten resolution used for overlap subtraction",
    )

    @property
    def clean_distance(self) -> float:
        """Clean distance expressed in fixed-point units."""
        return self.clean_delta * self.scale


class ThinFeatureConfig(BaseModel):
    """Configuration for thin feature removal."""

    amount: float = Field(
        default=0.0,
        ge=0.0,
        description="Erosion distance; features thinner than twice this vanish (0 = disabled)",
    )
    resolution: float = Field(
        default=2.0,
        gt=0.0,
        le=20.0,
        description="Distance between points when flattening for thin feature removal",
    )
    clone: bool = Field(
        default=False,
        description="Keep the originals and add the cleaned copies on top",
    )


class PaletteConfig(BaseModel):
    """Configuration for color snapping."""

    shades: list[str] = Field(
        default_factory=lambda: list(PANCAKE_SHADES),
        min_length=1,
        description="Palette colors as hex strings, lightest first",
    )
    limit: int | None = Field(
        default=None,
        ge=1,
        description="Only match against the first N shades (None = all)",
    )
    outline: bool = Field(
        default=False,
        description="Add a darker outline around every filled shape",
    )
    outline_width: float = Field(
        default=5.0,
        gt=0.0,
        le=50.0,
        description="Stroke width of generated outlines",
    )

    @field_validator("shades")
    @classmethod
    def _check_hex(cls, shades: list[str]) -> list[str]:
        from pancakepath.core.color import color_string_to_array

        for shade in shades:
            if not shade.startswith("#") or color_string_to_array(shade) is None:
                raise ValueError(f"Palette shade must be a hex color, got {shade!r}")
        return shades


class LayoutConfig(BaseModel):
    """Configuration for duplicating a traced shape across the griddle."""

    copies: int = Field(
        default=1,
        description="Number of copies to place (1, 2, 4 or 8)",
    )
    griddle_width: float = Field(
        default=443.0,
        gt=0.0,
        description="Printable griddle width in millimeters",
    )
    griddle_height: float = Field(
        default=210.0,
        gt=0.0,
        description="Printable griddle height in millimeters",
    )

    @field_validator("copies")
    @classmethod
    def _check_copies(cls, copies: int) -> int:
        if copies not in (1, 2, 4, 8):
            raise ValueError(f"copies must be 1, 2, 4 or 8, got {copies}")
        return copies


class ExportConfig(BaseModel):
    """Configuration for raster export."""

    dpi: int = Field(
        default=72,
        ge=1,
        le=1200,
        description="Rasterization resolution (72 = one pixel per unit)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class PancakeSettings(BaseModel):
    """Main application settings."""

    offset: OffsetConfig = Field(default_factory=OffsetConfig)
    thin_features: ThinFeatureConfig = Field(default_factory=ThinFeatureConfig)
    palette: PaletteConfig = Field(default_factory=PaletteConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> PancakeSettings:
    """Get default application settings."""
    return PancakeSettings()
