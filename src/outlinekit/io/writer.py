"""Font writer for saving edited fonts.

This module provides the FontWriter class for writing edited glyph
outlines back into a font under a distinct family name.
"""

from datetime import datetime
from pathlib import Path

from fontTools.ttLib import TTFont

from outlinekit.domain import Glyph
from outlinekit.exceptions import FontSaveError, GlyphNotFoundError
from outlinekit.io.converter import domain_glyph_to_fonttools

# Name table IDs we modify
NAME_ID_FAMILY = 1
NAME_ID_FULL_NAME = 4
NAME_ID_VERSION = 5
NAME_ID_POSTSCRIPT = 6
NAME_ID_TYPOGRAPHIC_FAMILY = 16

DEFAULT_NAME_SUFFIX = " Edited"


def update_font_names(font: TTFont, suffix: str = DEFAULT_NAME_SUFFIX) -> None:
    """Update font name table entries with a suffix.

    Lets the edited font be installed next to the original.

    Args:
        font: The fonttools TTFont object to modify
        suffix: Suffix to add (default: " Edited")
    """
    name_table = font["name"]
    updates: list[tuple[int, int, int, int, str]] = []

    for record in name_table.names:
        try:
            original = record.toUnicode()
        except UnicodeDecodeError:
            continue

        name_id = record.nameID
        new_name: str | None = None

        if name_id in (NAME_ID_FAMILY, NAME_ID_TYPOGRAPHIC_FAMILY):
            # "Roboto" -> "Roboto Edited"
            new_name = original + suffix

        elif name_id == NAME_ID_FULL_NAME:
            # "Roboto Regular" -> "Roboto Edited Regular"
            head, _, style = original.rpartition(" ")
            new_name = f"{head}{suffix} {style}" if head else original + suffix

        elif name_id == NAME_ID_POSTSCRIPT:
            # "Roboto-Regular" -> "RobotoEdited-Regular"
            ps_suffix = suffix.replace(" ", "")
            family, dash, style = original.partition("-")
            new_name = f"{family}{ps_suffix}{dash}{style}"

        elif name_id == NAME_ID_VERSION:
            # "Version 2.015" -> "Version 2.015; Edited 2026-01-05T14:30:45"
            timestamp = datetime.now().strftime("%Y-%m-%dT%H:%M:%S")
            new_name = f"{original};{suffix} {timestamp}"

        if new_name is not None:
            updates.append(
                (name_id, record.platformID, record.platEncID, record.langID, new_name)
            )

    for name_id, platform_id, plat_enc_id, lang_id, new_name in updates:
        name_table.setName(new_name, name_id, platform_id, plat_enc_id, lang_id)


class FontWriter:
    """Writes edited glyphs into a font and saves it.

    Example:
        writer = FontWriter(font, Path("output.ttf"))
        writer.update_glyph(edited_glyph)
        writer.save()
    """

    def __init__(self, font: TTFont, output_path: Path, name_suffix: str = DEFAULT_NAME_SUFFIX) -> None:
        """Initialize the font writer.

        Args:
            font: The fonttools TTFont object to write
            output_path: Path where the font will be saved
            name_suffix: Suffix appended to the family names on save
        """
        self._font = font
        self._output_path = output_path
        self._name_suffix = name_suffix

    def update_glyph(self, glyph: Glyph) -> None:
        """Write a domain glyph's outline and advance width into the font.

        Args:
            glyph: Domain glyph model with modifications

        Raises:
            GlyphNotFoundError: If glyph name not found in font
        """
        if glyph.name not in self._font.getGlyphOrder():
            raise GlyphNotFoundError(glyph.name)

        domain_glyph_to_fonttools(glyph, self._font)

    def save(self) -> None:
        """Rename the font and save it to the output path.

        Raises:
            FontSaveError: If file cannot be written
        """
        update_font_names(self._font, self._name_suffix)
        try:
            self._font.save(str(self._output_path))
        except OSError as e:
            raise FontSaveError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_output_path(input_path: Path) -> Path:
        """Generate the default output path for an edited font.

        Converts: font.ttf -> font-Edited.ttf
                  Roboto-Regular.otf -> Roboto-Regular-Edited.otf

        Args:
            input_path: Original font file path

        Returns:
            Path with -Edited suffix before extension
        """
        return input_path.parent / f"{input_path.stem}-Edited{input_path.suffix}"
