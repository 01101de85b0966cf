"""Theme colors and color utilities for the UI."""


class HomeColors:
    """Dark circuit-board palette."""

    BG = "#0b1220"
    CARD_BG = "#111a2e"
    CARD_BORDER = "#1f2a44"

    TEXT_PRIMARY = "#e6f1ff"
    TEXT_MUTED = "#7f8ea3"

    CORRECT = "#22c55e"
    WRONG = "#ef4444"
    LOCKED = "#475569"


# Section accent colors by the catalog's color name
SECTION_COLORS = {
    "cyan": "#22d3ee",
    "magenta": "#e879f9",
    "green": "#4ade80",
    "yellow": "#facc15",
    "orange": "#fb923c",
    "purple": "#a78bfa",
}


def section_color(name: str) -> str:
    """Hex color for a catalog color name; unknown names fall back to cyan."""
    return SECTION_COLORS.get(name, SECTION_COLORS["cyan"])


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    a = a.strip()
    b = b.strip()
    if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
        return a
    try:
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
    except ValueError:
        return a
    t = max(0.0, min(1.0, float(t)))
    r = int(ar + (br - ar) * t)
    g = int(ag + (bg - ag) * t)
    bl = int(ab + (bb - ab) * t)
    return f"#{r:02X}{g:02X}{bl:02X}"


def locked_color(hex_color: str) -> str:
    """Dimmed variant of an accent color for locked cards."""
    return blend_hex(hex_color, HomeColors.LOCKED, 0.7)
