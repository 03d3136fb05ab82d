"""Configuration management for pancakepath.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- OffsetConfig: Fixed-point clipping and offset settings
- ThinFeatureConfig: Thin feature removal settings
- PaletteConfig: Color snapping settings
- LayoutConfig: Duplication layout settings
- ExportConfig: Raster export settings
- LoggingConfig: Logging settings
- PancakeSettings: Main application settings
"""

from pancakepath.config.settings import (
    PANCAKE_SHADES,
    ExportConfig,
    LayoutConfig,
    LoggingConfig,
    OffsetConfig,
    PaletteConfig,
    PancakeSettings,
    ThinFeatureConfig,
    get_default_settings,
)

__all__ = [
    "PANCAKE_SHADES",
    "ExportConfig",
    "LayoutConfig",
    "LoggingConfig",
    "OffsetConfig",
    "PaletteConfig",
    "PancakeSettings",
    "ThinFeatureConfig",
    "get_default_settings",
]
