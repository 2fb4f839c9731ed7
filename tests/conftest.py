"""Shared fixtures: small fonts built on the fly with fontTools."""

from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.t2CharStringPen import T2CharStringPen
from fontTools.pens.ttGlyphPen import TTGlyphPen

UNITS_PER_EM = 1000
ASCENDER = 800
DESCENDER = -200

ADVANCE_WIDTHS = {".notdef": 500, "space": 250, "O": 600, "D": 600}


def _draw_o_truetype(pen) -> None:
    # Outer clockwise (fill), inner counter-clockwise (hole)
    pen.moveTo((0, 0))
    pen.lineTo((0, 700))
    pen.lineTo((500, 700))
    pen.lineTo((500, 0))
    pen.closePath()
    pen.moveTo((100, 100))
    pen.lineTo((400, 100))
    pen.lineTo((400, 600))
    pen.lineTo((100, 600))
    pen.closePath()


def _draw_d_truetype(pen) -> None:
    pen.moveTo((100, 0))
    pen.lineTo((100, 700))
    pen.lineTo((250, 700))
    pen.qCurveTo((500, 700), (500, 350))
    pen.qCurveTo((500, 0), (250, 0))
    pen.closePath()


def _draw_o_cff(pen) -> None:
    # CFF winding: outer counter-clockwise, inner clockwise
    pen.moveTo((0, 0))
    pen.lineTo((500, 0))
    pen.lineTo((500, 700))
    pen.lineTo((0, 700))
    pen.closePath()
    pen.moveTo((100, 100))
    pen.lineTo((100, 600))
    pen.lineTo((400, 600))
    pen.lineTo((400, 100))
    pen.closePath()


def _draw_d_cff(pen) -> None:
    pen.moveTo((100, 0))
    pen.lineTo((250, 0))
    pen.curveTo((390, 0), (500, 160), (500, 350))
    pen.curveTo((500, 540), (390, 700), (250, 700))
    pen.lineTo((100, 700))
    pen.closePath()


def _finish_font(fb: FontBuilder, lsb: dict[str, int]) -> None:
    fb.setupHorizontalMetrics({name: (ADVANCE_WIDTHS[name], lsb[name]) for name in ADVANCE_WIDTHS})
    fb.setupHorizontalHeader(ascent=ASCENDER, descent=DESCENDER)
    fb.setupNameTable({"familyName": "Outline Test", "styleName": "Regular"})
    fb.setupOS2(
        sTypoAscender=ASCENDER,
        sTypoDescender=DESCENDER,
        usWinAscent=ASCENDER,
        usWinDescent=-DESCENDER,
    )
    fb.setupPost()


def _start_font(is_ttf: bool) -> FontBuilder:
    fb = FontBuilder(UNITS_PER_EM, isTTF=is_ttf)
    fb.setupGlyphOrder(list(ADVANCE_WIDTHS))
    fb.setupCharacterMap({32: "space", ord("O"): "O", ord("D"): "D"})
    return fb


@pytest.fixture
def ttf_font_path(tmp_path: Path) -> Path:
    """TrueType font with an empty glyph, a glyph with a hole and a curved glyph."""
    fb = _start_font(is_ttf=True)

    glyphs = {}
    for name, draw in ((".notdef", None), ("space", None), ("O", _draw_o_truetype), ("D", _draw_d_truetype)):
        pen = TTGlyphPen(None)
        if draw is not None:
            draw(pen)
        glyphs[name] = pen.glyph()
    fb.setupGlyf(glyphs)

    _finish_font(fb, {".notdef": 0, "space": 0, "O": 0, "D": 100})
    path = tmp_path / "Test-Regular.ttf"
    fb.save(str(path))
    return path


@pytest.fixture
def otf_font_path(tmp_path: Path) -> Path:
    """CFF font with the same glyphs as ``ttf_font_path``, D drawn with cubics."""
    fb = _start_font(is_ttf=False)

    charstrings = {}
    for name, draw in ((".notdef", None), ("space", None), ("O", _draw_o_cff), ("D", _draw_d_cff)):
        pen = T2CharStringPen(ADVANCE_WIDTHS[name], None)
        if draw is not None:
            draw(pen)
        charstrings[name] = pen.getCharString()
    fb.setupCFF("OutlineTest-Regular", {"FullName": "Outline Test Regular"}, charstrings, {})

    _finish_font(fb, {".notdef": 0, "space": 0, "O": 0, "D": 100})
    path = tmp_path / "Test-Regular.otf"
    fb.save(str(path))
    return path
