# =============================================================================
# Color Palette
# =============================================================================
# Fixed, ordered list of colors a user can assign to an account. Preferences
# store an index into this list, so the order must never change; colors may
# only be appended.
# =============================================================================

from dataclasses import dataclass


@dataclass(frozen=True)
class PaletteColor:
    """
    One selectable account color.

    Attributes:
        name: Human-readable color name.
        hex: RGB hex value used by the terminal UI.
    """
    name: str
    hex: str


PALETTE: tuple[PaletteColor, ...] = (
    PaletteColor("red", "#ff3b30"),
    PaletteColor("orange", "#ff9500"),
    PaletteColor("yellow", "#ffcc00"),
    PaletteColor("green", "#34c759"),
    PaletteColor("mint", "#00c7be"),
    PaletteColor("teal", "#30b0c7"),
    PaletteColor("blue", "#007aff"),
    PaletteColor("indigo", "#5856d6"),
    PaletteColor("purple", "#af52de"),
    PaletteColor("pink", "#ff2d55"),
)

PALETTE_SIZE = len(PALETTE)

# Status colors that are not part of the selectable palette
NEUTRAL_COLOR = PaletteColor("gray", "#8e8e93")
ERROR_COLOR = PaletteColor("red", "#ff3b30")


def default_color_index(account_id: str, palette_size: int = PALETTE_SIZE) -> int:
    """
    Derive a stable color index from an account id.

    Sum of the id's code points modulo the palette size. Pure: the result is
    never written back, so reading a color for an account seen for the
    first time has no side effects.
    """
    size = max(1, palette_size)
    return sum(ord(char) for char in account_id) % size
