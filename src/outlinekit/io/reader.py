"""Reading glyph outlines out of TrueType and CFF fonts."""

from collections.abc import Iterator
from pathlib import Path

from fontTools.ttLib import TTFont, TTLibError

from outlinekit.config import FontMetrics
from outlinekit.domain import Glyph
from outlinekit.exceptions import FontFormatError, FontLoadError, GlyphNotFoundError
from outlinekit.io.converter import fonttools_glyph_to_domain, is_cff


class FontReader:
    """Opens a font with fontTools and hands out domain Glyphs.

    Usable as a context manager, which loads on entry and closes on exit.

    Example:
        with FontReader(Path("Sans-Regular.otf")) as reader:
            for glyph in reader.iter_glyphs():
                print(glyph.name, len(glyph.path))
    """

    def __init__(self, font_path: Path) -> None:
        self._font_path = font_path
        self._font: TTFont | None = None

    def load(self) -> None:
        """Parse the font file.

        Raises:
            FileNotFoundError: Nothing exists at the path
            FontLoadError: fontTools could not parse the file
            FontFormatError: The font carries neither glyf nor CFF outlines
        """
        if not self._font_path.exists():
            raise FileNotFoundError(f"No font at {self._font_path}")

        try:
            font = TTFont(str(self._font_path))
        except (TTLibError, OSError) as e:
            raise FontLoadError(str(self._font_path), str(e)) from e

        if "glyf" not in font and not is_cff(font):
            font.close()
            raise FontFormatError(str(self._font_path), "no glyf or CFF outline table")

        self._font = font

    @property
    def font(self) -> TTFont:
        """The underlying TTFont.

        Raises:
            RuntimeError: load() has not been called
        """
        if self._font is None:
            raise RuntimeError("Font not loaded. Call load() first.")
        return self._font

    @property
    def format(self) -> str:
        """"OpenType" for CFF outlines, "TrueType" for glyf outlines."""
        return "OpenType" if is_cff(self.font) else "TrueType"

    @property
    def units_per_em(self) -> int:
        return self.font["head"].unitsPerEm  # type: ignore[attr-defined]

    @property
    def glyph_count(self) -> int:
        return self.font["maxp"].numGlyphs  # type: ignore[attr-defined]

    @property
    def metrics(self) -> FontMetrics:
        """Vertical metrics the design tools measure against.

        Taken from OS/2 typo metrics when present, hhea otherwise.
        """
        font = self.font
        if "OS/2" in font:
            ascender = font["OS/2"].sTypoAscender  # type: ignore[attr-defined]
            descender = font["OS/2"].sTypoDescender  # type: ignore[attr-defined]
        else:
            ascender = font["hhea"].ascent  # type: ignore[attr-defined]
            descender = font["hhea"].descent  # type: ignore[attr-defined]
        return FontMetrics(
            units_per_em=self.units_per_em,
            ascender=ascender,
            descender=descender,
        )

    def iter_glyphs(self) -> Iterator[Glyph]:
        """Yield every glyph, in glyph order."""
        for glyph_name in self.font.getGlyphOrder():
            yield self.get_glyph(glyph_name)

    def get_glyph(self, name: str) -> Glyph:
        """Convert one glyph to the domain model.

        Raises:
            GlyphNotFoundError: The font has no glyph called ``name``
        """
        glyph_set = self.font.getGlyphSet()
        if name not in glyph_set:
            raise GlyphNotFoundError(name)
        return fonttools_glyph_to_domain(name=name, fonttools_glyph=glyph_set[name], font=self.font)

    def close(self) -> None:
        if self._font is not None:
            self._font.close()
            self._font = None

    def __enter__(self) -> "FontReader":
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        self.close()
