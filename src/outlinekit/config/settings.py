"""Configuration settings for Outlinekit."""

from pathlib import Path

from pydantic import BaseModel, Field


class FontMetrics(BaseModel):
    """Vertical font metrics the design tools measure against."""

    units_per_em: int = Field(
        default=1000,
        ge=16,
        le=16384,
        description="Units per em of the font",
    )
    ascender: float = Field(
        default=800.0,
        description="Ascender height in font units",
    )
    descender: float = Field(
        default=-200.0,
        description="Descender depth in font units (usually negative)",
    )

    @property
    def x_height(self) -> float:
        """Approximate x-height derived from the ascender."""
        return self.ascender * 0.72


class DesignParameters(BaseModel):
    """Parametric design tool sliders.

    Every slider defaults to 0, which leaves the outline unchanged.
    Percentages are relative to units per em unless noted otherwise.
    """

    weight: float = Field(default=0.0, ge=-100.0, le=100.0, description="Stroke weight offset")
    width: float = Field(default=0.0, ge=-100.0, le=100.0, description="Horizontal scale (percent)")
    contrast: float = Field(
        default=0.0,
        ge=-100.0,
        le=100.0,
        description="Vertical vs horizontal stroke thickness",
    )
    optical_size: float = Field(
        default=0.0,
        ge=-50.0,
        le=50.0,
        description="Radial push away from the glyph center",
    )
    x_height: float = Field(default=0.0, ge=-100.0, le=100.0, description="x-height zone scale")
    ascender_extend: float = Field(
        default=0.0,
        ge=-100.0,
        le=100.0,
        description="Stretch above the x-height",
    )
    descender_extend: float = Field(
        default=0.0,
        ge=-100.0,
        le=100.0,
        description="Stretch below the baseline",
    )
    spacing: float = Field(default=0.0, ge=-100.0, le=100.0, description="Sidebearing change")
    roundness: float = Field(default=0.0, ge=-100.0, le=100.0, description="Handle length scale")
    slant: float = Field(default=0.0, ge=-30.0, le=30.0, description="Shear angle in degrees")
    ink_trap: float = Field(default=0.0, ge=0.0, le=100.0, description="Ink trap depth at acute joints")
    serif: float = Field(default=0.0, ge=0.0, le=100.0, description="Tangential extension at terminals")
    overshoot: float = Field(
        default=0.0,
        ge=-50.0,
        le=50.0,
        description="Push near-zone points past the alignment zones",
    )

    def is_neutral(self) -> bool:
        """Check whether every slider is at its neutral value."""
        return all(value == 0 for value in self.model_dump().values())

    def needs_normals(self) -> bool:
        """Check whether any normal-based tool is active."""
        return any(v != 0 for v in (self.weight, self.contrast, self.ink_trap, self.serif))


class TransformValues(BaseModel):
    """Combined whole-glyph transform, applied about the glyph center."""

    scale_x: float = Field(default=1.0, ge=0.1, le=3.0, description="Horizontal scale factor")
    scale_y: float = Field(default=1.0, ge=0.1, le=3.0, description="Vertical scale factor")
    rotation: float = Field(default=0.0, ge=-180.0, le=180.0, description="Rotation in degrees")
    shift_x: float = Field(default=0.0, ge=-500.0, le=500.0, description="Horizontal shift")
    shift_y: float = Field(default=0.0, ge=-500.0, le=500.0, description="Vertical shift")
    skew_x: float = Field(default=0.0, ge=-45.0, le=45.0, description="Horizontal skew in degrees")
    skew_y: float = Field(default=0.0, ge=-45.0, le=45.0, description="Vertical skew in degrees")


class SimplifierConfig(BaseModel):
    """Configuration for outline simplification with UPM-relative tolerances.

    Each tolerance is ``max(floor, upm * factor)`` so small fonts still get a
    usable minimum.
    """

    curve_tolerance_factor: float = Field(
        default=0.002,
        gt=0.0,
        le=0.05,
        description="Maximum refit deviation as a fraction of UPM",
    )
    curve_tolerance_floor: float = Field(default=2.0, gt=0.0, description="Minimum refit deviation")
    straight_tolerance_factor: float = Field(
        default=0.002,
        gt=0.0,
        le=0.05,
        description="Control point distance from chord that still counts as straight",
    )
    straight_tolerance_floor: float = Field(default=2.0, gt=0.0, description="Minimum straightness tolerance")
    extremum_tolerance_factor: float = Field(
        default=0.0015,
        gt=0.0,
        le=0.05,
        description="Distance from a contour bounding-box edge that counts as an extremum",
    )
    extremum_tolerance_floor: float = Field(default=1.5, gt=0.0, description="Minimum extremum tolerance")
    line_tolerance_factor: float = Field(
        default=0.0005,
        gt=0.0,
        le=0.05,
        description="Collinearity tolerance as a fraction of UPM",
    )
    line_tolerance_floor: float = Field(default=0.5, gt=0.0, description="Minimum collinearity tolerance")
    tangent_threshold: float = Field(
        default=0.80,
        ge=-1.0,
        le=1.0,
        description="Minimum tangent dot product for a smooth junction",
    )
    samples_per_segment: int = Field(
        default=16,
        ge=4,
        le=128,
        description="Samples per original segment when measuring refit error",
    )
    max_passes: int = Field(default=5, ge=1, le=20, description="Maximum merge passes")

    @staticmethod
    def scale_tolerance(factor: float, floor: float, upm: int) -> float:
        """Scale a tolerance for the given UPM.

        Args:
            factor: Tolerance as a fraction of UPM
            floor: Smallest allowed tolerance
            upm: The actual UPM of the font

        Returns:
            Scaled tolerance value
        """
        return max(floor, upm * factor)

    def get_curve_tolerance(self, upm: int) -> float:
        """Get curve refit tolerance scaled for UPM."""
        return self.scale_tolerance(self.curve_tolerance_factor, self.curve_tolerance_floor, upm)

    def get_straight_tolerance(self, upm: int) -> float:
        """Get straight-curve tolerance scaled for UPM."""
        return self.scale_tolerance(
            self.straight_tolerance_factor, self.straight_tolerance_floor, upm
        )

    def get_extremum_tolerance(self, upm: int) -> float:
        """Get extremum detection tolerance scaled for UPM."""
        return self.scale_tolerance(
            self.extremum_tolerance_factor, self.extremum_tolerance_floor, upm
        )

    def get_line_tolerance(self, upm: int) -> float:
        """Get collinear line tolerance scaled for UPM."""
        return self.scale_tolerance(self.line_tolerance_factor, self.line_tolerance_floor, upm)


class IndentConfig(BaseModel):
    """Configuration for boolean indents."""

    samples_per_curve: int = Field(
        default=40,
        ge=2,
        le=512,
        description="Polygon samples per curved segment",
    )


class SliceConfig(BaseModel):
    """Configuration for line slicing."""

    samples_per_curve: int = Field(
        default=32,
        ge=2,
        le=512,
        description="Polyline samples per curved segment when intersecting",
    )
    min_separation: float = Field(
        default=1.0,
        ge=0.0,
        le=50.0,
        description="Hits closer than this are treated as the same crossing",
    )


class ProcessingConfig(BaseModel):
    """Configuration for font processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )
    skip_composite: bool = Field(
        default=True,
        description="Skip composite glyphs",
    )
    remove_duplicates: bool = Field(
        default=True,
        description="Drop duplicate points before writing glyphs",
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


class OutlineKitSettings(BaseModel):
    """Main application settings."""

    design: DesignParameters = Field(default_factory=DesignParameters)
    transform: TransformValues = Field(default_factory=TransformValues)
    simplifier: SimplifierConfig = Field(default_factory=SimplifierConfig)
    indent: IndentConfig = Field(default_factory=IndentConfig)
    slicing: SliceConfig = Field(default_factory=SliceConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> OutlineKitSettings:
    """Get default application settings."""
    return OutlineKitSettings()
