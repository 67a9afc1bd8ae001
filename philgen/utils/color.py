"""Color helpers shared by every trait. All randomness comes from the caller's rng."""

from __future__ import annotations

import colorsys
import re

import numpy as np

# Numbered palette; 0 (or any unknown number) means "random".
COLOR_KEY: dict[int, str] = {
    1: "#FF0000", 2: "#00FF00", 3: "#0000FF", 4: "#FFFF00", 5: "#FF00FF",
    6: "#00FFFF", 7: "#FFFFFF", 8: "#000000", 9: "#FFA500", 10: "#800080",
    11: "#808080", 12: "#A52A2A", 13: "#FF4500", 14: "#FFD700", 15: "#00CED1",
    16: "#FF69B4", 17: "#0073CF", 18: "#9ACD32", 19: "#DAA520", 20: "#4B0082",
    21: "#F0E68C", 22: "#DC143C", 23: "#ADFF2F", 24: "#20B2AA", 25: "#FF6347",
    26: "#6A5ACD", 27: "#FFD100", 28: "#9932CC", 29: "#32CD32", 30: "#FF1493",
    31: "#4169E1", 32: "#CD5C5C", 33: "#FF5F1F", 34: "#8A2BE2", 35: "#228B22",
    36: "#D2691E", 37: "#BA55D3", 38: "#5F9EA0", 39: "#FF8C00", 40: "#7B68EE",
    41: "#48D1CC", 42: "#C71585", 43: "#191970", 44: "#E9967A", 45: "#9400D3",
    46: "#00B7EB", 47: "#FFDAB9", 48: "#2E8B57", 49: "#D2B48C", 50: "#DB7093",
    51: "#87CEEB", 52: "#8B4513", 53: "#F08080", 54: "#6B8E23", 55: "#CD853F",
    56: "#EEE8AA", 57: "#483D8B", 58: "#98FB98", 59: "#B8860B", 60: "#00FA9A",
    61: "#E6E6FA", 62: "#FFB6C1", 63: "#3CB371", 64: "#ADD8E6", 65: "#8B008B",
    66: "#BC8F8F", 67: "#40E0D0", 68: "#F5DEB3",
}

# Matte subset used where bright hues would clash (spikes, nose).
STANDARD_COLORS = (8, 11, 12, 13, 21, 22, 32, 33, 36, 38, 44, 49, 52, 53, 55, 56, 66)

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def random_hex(rng: np.random.Generator) -> str:
    r, g, b = rng.integers(0, 256, size=3)
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def random_color_number(rng: np.random.Generator) -> int:
    return int(rng.integers(1, len(COLOR_KEY) + 1))


def color_by_number(n: int, rng: np.random.Generator) -> str:
    """Palette color for ``n``; 0 or an unknown number draws a random color."""
    if n in COLOR_KEY:
        return COLOR_KEY[n]
    return random_hex(rng)


def pick(options: tuple | list, rng: np.random.Generator):
    return options[int(rng.integers(0, len(options)))]


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    m = _HEX_RE.match(color.strip())
    if not m:
        raise ValueError(f"Not a #rrggbb color: {color!r}")
    value = m.group(1)
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def rgb_to_hex(r: float, g: float, b: float) -> str:
    return "#" + "".join(f"{int(round(min(max(v, 0), 255))):02x}" for v in (r, g, b))


def hex_to_hsl(color: str) -> tuple[float, float, float]:
    """(hue in degrees, saturation 0–1, lightness 0–1)."""
    r, g, b = (v / 255.0 for v in hex_to_rgb(color))
    h, l, s = colorsys.rgb_to_hls(r, g, b)
    return h * 360.0, s, l


def hsl_to_hex(h: float, s: float, l: float) -> str:
    r, g, b = colorsys.hls_to_rgb((h % 360.0) / 360.0, _clamp(l, 0.0, 1.0), _clamp(s, 0.0, 1.0))
    return rgb_to_hex(r * 255, g * 255, b * 255)


def shade(color: str, delta_lightness: float) -> str:
    """Shift lightness by ``delta_lightness`` (−1..1); negative darkens."""
    h, s, l = hex_to_hsl(color)
    return hsl_to_hex(h, s, l + delta_lightness)


def shift_hue(color: str, degrees: float) -> str:
    h, s, l = hex_to_hsl(color)
    return hsl_to_hex(h + degrees, s, l)


def luminance(color: str) -> float:
    r, g, b = hex_to_rgb(color)
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255.0


def contrasting_color(color: str) -> str:
    """Near-black or white, whichever reads better on ``color``."""
    return "#111111" if luminance(color) > 150 / 255 else "#ffffff"


def colors_near(a: str, b: str, threshold: int = 24) -> bool:
    """True if every RGB channel of the two colors differs by less than ``threshold``."""
    return all(abs(x - y) < threshold for x, y in zip(hex_to_rgb(a), hex_to_rgb(b)))


def harmonious_palette(rng: np.random.Generator, count: int = 3) -> list[str]:
    """A random base color plus ``count - 1`` colors spaced evenly around the hue wheel."""
    if count < 1:
        return []
    base = random_hex(rng)
    colors = [base]
    h, s, l = hex_to_hsl(base)
    for i in range(1, count):
        hue = h + (360.0 / count) * i
        if count > 3:
            hue += rng.uniform(-15.0, 15.0)
        sat = _clamp(s + rng.uniform(-0.2, 0.2), 0.3, 1.0)
        light = _clamp(l + rng.uniform(-0.15, 0.15), 0.3, 0.8)
        colors.append(hsl_to_hex(hue, sat, light))
    return colors


def _clamp(v: float, lo: float, hi: float) -> float:
    return min(max(v, lo), hi)
