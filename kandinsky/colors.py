"""
Kandinsky Colors
================
HSLA colours, harmony palettes and the colour pickers shapes use.

Colours are expressed the way the sketch thinks about them: hue in
degrees, saturation and lightness in percent, alpha in [0, 1].
"""

import colorsys
from dataclasses import dataclass

SCHEMES = ('mono', 'comp', 'split', 'triad', 'analog')

# Colourful = HSB brightness in [COLORFUL_MIN, COLORFUL_MAX)
COLORFUL_MIN = 15
COLORFUL_MAX = 85


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class Color:
    h: float
    s: float
    l: float
    a: float = 1.0

    @property
    def rgb(self):
        r, g, b = colorsys.hls_to_rgb((self.h % 360) / 360.0,
                                      _clamp(self.l, 0, 100) / 100.0,
                                      _clamp(self.s, 0, 100) / 100.0)
        return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))

    @property
    def rgba(self):
        return self.rgb + (int(round(_clamp(self.a, 0.0, 1.0) * 255)),)

    @property
    def hex(self):
        r, g, b = self.rgb
        return f'#{r:02x}{g:02x}{b:02x}'

    @property
    def brightness(self):
        """HSB brightness (value) in percent"""
        return max(self.rgb) / 255 * 100

    def with_alpha(self, alpha):
        return Color(self.h, self.s, self.l, alpha)

    def darker(self, factor=0.8):
        return Color(self.h, self.s, self.l * factor, self.a)

    def same_as(self, other):
        """Compare the way the rendered colour strings compare"""
        return other is not None and self.rgba == other.rgba

    @classmethod
    def from_hsb(cls, h, s, b, a=1.0):
        s, v = s / 100.0, b / 100.0
        l = v * (1 - s / 2)
        if l in (0, 1):
            sl = 0.0
        else:
            sl = (v - l) / min(l, 1 - l)
        return cls(h % 360, sl * 100, l * 100, a)


INK = Color(0, 0, 15, 0.8)


def hue_distance(h1, h2):
    """Shortest distance between two hues, in degrees"""
    diff = abs(h1 - h2) % 360
    return 360 - diff if diff > 180 else diff


# =============================================================================
# Palettes
# =============================================================================

def generate_palette(rng, scheme=None, base_hue=None):
    """Five colours from a random hue and a colour-harmony scheme.

    Returns (scheme, colours).
    """
    scheme = scheme or rng.choice(SCHEMES)
    if scheme not in SCHEMES:
        raise ValueError(f'Unknown scheme: {scheme}')
    base = rng.uniform(0, 360) if base_hue is None else base_hue

    def hue_for(i):
        if scheme == 'mono':
            return base
        if scheme == 'comp':
            return base + (i % 2) * 180
        if scheme == 'split':
            return base + (150 if i % 3 > 0 else 0) + (60 if i % 3 == 2 else 0)
        if scheme == 'triad':
            return base + (i % 3) * 120
        return base + (i - 2) * 30 + 360

    colors = [Color(hue_for(i) % 360, rng.uniform(40, 95), rng.uniform(30, 90)) for i in range(5)]
    return scheme, colors


def generate_rich_palette(rng):
    """Near-black, off-white and 5-7 well separated hues with variations"""
    colors = [Color(0, 0, 10), Color(rng.uniform(0, 360), 10, 90)]

    base_hues = []
    for _ in range(rng.randint(5, 7)):
        for _ in range(100):
            hue = rng.uniform(0, 360)
            if all(hue_distance(hue, other) >= 45 for other in base_hues):
                base_hues.append(hue)
                break

    for hue in base_hues:
        for _ in range(rng.randint(5, 7)):
            s = rng.uniform(75, 95) + rng.uniform(-10, 10)
            l = rng.uniform(40, 65) + rng.uniform(-10, 10)
            colors.append(Color(hue, _clamp(s, 65, 100), _clamp(l, 30, 75)))
    return colors


def colorful(palette):
    """Drop near-black and near-white entries"""
    return [c for c in palette if COLORFUL_MIN <= c.brightness < COLORFUL_MAX]


# =============================================================================
# Pickers
# =============================================================================

def random_vibrant(rng):
    return Color(rng.uniform(0, 360), rng.uniform(70, 100), rng.uniform(40, 70))


def pick_colorful(rng, palette):
    """Colourful entry, else any palette entry, else a synthesized colour"""
    source = colorful(palette) or list(palette)
    if not source:
        return random_vibrant(rng)
    return rng.choice(source)


def pick_distinct(rng, palette, avoid):
    """Colourful entry different from avoid, degrading through fallbacks"""
    candidates = [c for c in colorful(palette) if not c.same_as(avoid)]
    if candidates:
        return rng.choice(candidates)
    others = [c for c in palette if not c.same_as(avoid)]
    if others:
        other = rng.choice(others)
        return Color(other.h, other.s, rng.uniform(40, 70))
    if avoid is None:
        return random_vibrant(rng)
    return Color((avoid.h + 180) % 360, avoid.s, avoid.l, avoid.a)


def contrasting_color(rng, first):
    """A vivid colour whose hue sits 90-270 degrees away from first"""
    hue = (first.h + rng.uniform(90, 270)) % 360
    return Color(hue, rng.uniform(70, 100), rng.uniform(50, 85))


def shape_color(rng, palette=None, avoid=None):
    """Rogue colour generator.

    80% of the time (or always without a palette) a fresh HSL colour,
    otherwise a palette sample. A collision with avoid is resolved by a
    fixed hue/saturation/lightness perturbation.
    """
    if not palette or rng.random() < 0.8:
        color = Color(rng.uniform(0, 360), rng.uniform(50, 100), rng.uniform(40, 90))
    else:
        color = rng.choice(palette)

    if avoid is not None and color.same_as(avoid):
        return Color((color.h + 80) % 360,
                     _clamp(color.s * 0.85, 40, 100),
                     _clamp(color.l * 1.15, 30, 90))
    return color

