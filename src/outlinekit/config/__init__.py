"""Configuration management for outlinekit.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- DesignParameters: Design tool sliders
- FontMetrics: Metrics the design tools measure against
- TransformValues: Whole-glyph transform values
- SimplifierConfig: Outline simplification tolerances
- IndentConfig / SliceConfig: Sampling settings for indents and slicing
- ProcessingConfig: Font processing settings
- LoggingConfig: Logging settings
- OutlineKitSettings: Main application settings
"""

from outlinekit.config.settings import (
    DesignParameters,
    FontMetrics,
    IndentConfig,
    LoggingConfig,
    OutlineKitSettings,
    ProcessingConfig,
    SimplifierConfig,
    SliceConfig,
    TransformValues,
    get_default_settings,
)

__all__ = [
    "DesignParameters",
    "FontMetrics",
    "IndentConfig",
    "LoggingConfig",
    "OutlineKitSettings",
    "ProcessingConfig",
    "SimplifierConfig",
    "SliceConfig",
    "TransformValues",
    "get_default_settings",
]
