"""
Kandinsky Background
====================
Procedural backdrops rendered once per session (and again on resize
from the same seed, so the backdrop does not change under the user).

- noise: three decorrelated fractal value-noise fields mapped to R, G, B
- watercolor: pastel paper with multiply-blended translucent splotches
"""

import logging
import math
import random

import numpy as np
from PIL import Image, ImageDraw

from .colors import Color
from .config import map_range
from .surface import Surface

logger = logging.getLogger(__name__)

NOISE_SCALE = 0.002
NOISE_OCTAVES = 4
NOISE_FALLOFF = 0.5

PAPER = Color.from_hsb(40, 20, 90)
SUBDIVISION_ROUNDS = 4
SUBDIVISION_VARIANCE = 0.5
MAX_PLACEMENT_ATTEMPTS = 20


def render_background(width, height, seed, mode='watercolor', layers=150, bold=0):
    """Render the backdrop for a canvas extent"""
    generators = {
        'noise': lambda: noise_background(width, height, seed),
        'watercolor': lambda: watercolor_background(width, height, seed, layers, bold),
    }
    if mode not in generators:
        raise ValueError(f'Unknown background mode: {mode}')
    return generators[mode]()


# =============================================================================
# Noise bands
# =============================================================================

def value_noise(width, height, rng, scale=NOISE_SCALE, octaves=NOISE_OCTAVES, falloff=NOISE_FALLOFF):
    """Smooth fractal value noise in [0, 1] sampled on the pixel grid"""
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    total = np.zeros((height, width), dtype=np.float64)
    amplitude, norm = 0.5, 0.0
    for octave in range(octaves):
        freq = scale * (2 ** octave)
        fx, fy = xs * freq, ys * freq
        ix, iy = np.floor(fx).astype(int), np.floor(fy).astype(int)
        lattice = rng.random((iy.max() + 2, ix.max() + 2))
        tx, ty = fx - ix, fy - iy
        tx, ty = tx * tx * (3 - 2 * tx), ty * ty * (3 - 2 * ty)
        top = lattice[iy, ix] * (1 - tx) + lattice[iy, ix + 1] * tx
        bottom = lattice[iy + 1, ix] * (1 - tx) + lattice[iy + 1, ix + 1] * tx
        total += amplitude * (top * (1 - ty) + bottom * ty)
        norm += amplitude
        amplitude *= falloff
    return total / norm


def noise_background(width, height, seed):
    rng = np.random.default_rng(seed)
    channels = [value_noise(width, height, rng) * 255 for _ in range(3)]
    alpha = np.full((height, width), 255.0)
    return Surface.from_array(np.stack(channels + [alpha], axis=-1))


# =============================================================================
# Watercolour splotches
# =============================================================================

def regular_polygon(radius, sides, start_angle):
    step = 2 * math.pi / sides
    return [(math.cos(start_angle + i * step) * radius, math.sin(start_angle + i * step) * radius)
            for i in range(sides)]


def deform_polygon(points, rounds, variance, rng):
    """Midpoint displacement: each round inserts a jittered midpoint per edge"""
    current = list(points)
    for _ in range(rounds):
        arena = []
        for i, p1 in enumerate(current):
            p2 = current[(i + 1) % len(current)]
            length = math.dist(p1, p2)
            arena.append(p1)
            arena.append(((p1[0] + p2[0]) / 2 + rng.gauss(0, variance * length),
                          (p1[1] + p2[1]) / 2 + rng.gauss(0, variance * length)))
        current = arena
    return current


def place_splotch(rng, width, height, radius, placed):
    """Find a centre that does not collide badly with earlier splotches"""
    x = y = 0.0
    for _ in range(MAX_PLACEMENT_ATTEMPTS):
        x = rng.uniform(radius, width - radius) if width > 2 * radius else width / 2
        y = rng.uniform(radius, height - radius) if height > 2 * radius else height / 2
        if all(math.dist((x, y), (px, py)) >= (radius + pr) * 0.65 for px, py, pr in placed):
            break
    return x, y


def _multiply(paper, points, rgb, alpha):
    h, w = paper.shape[:2]
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    x0, y0 = max(0, int(min(xs))), max(0, int(min(ys)))
    x1, y1 = min(w, int(max(xs)) + 2), min(h, int(max(ys)) + 2)
    if x1 <= x0 or y1 <= y0:
        return
    mask = Image.new('L', (x1 - x0, y1 - y0), 0)
    ImageDraw.Draw(mask).polygon([(x - x0, y - y0) for x, y in points], fill=255)
    coverage = np.asarray(mask, dtype=np.float64)[..., None] / 255.0 * alpha
    paper[y0:y1, x0:x1] *= 1 - coverage * (1 - rgb)


def watercolor_background(width, height, seed, layers=150, bold=0):
    rng = random.Random(seed)
    base_unit = min(width, height)
    paper = np.empty((height, width, 3), dtype=np.float64)
    paper[:] = np.array(PAPER.rgb, dtype=np.float64) / 255.0

    count = rng.randint(4, 9)
    bold_indices = set(rng.sample(range(count), min(bold, count)))
    base_radius = map_range(count, 4, 10, base_unit * 0.22, base_unit * 0.08)

    placed = []
    for i in range(count):
        radius = rng.uniform(base_radius * 0.85, base_radius * 1.15)
        cx, cy = place_splotch(rng, width, height, radius, placed)
        placed.append((cx, cy, radius))

        zone_hue = rng.uniform(0, 360)
        alpha = 2.0 / layers
        saturation = 80
        if i in bold_indices:
            alpha *= 2.5
            saturation = 100

        for _ in range(layers):
            outline = regular_polygon(radius, rng.randint(3, 7), rng.uniform(0, 2 * math.pi))
            form = deform_polygon(outline, SUBDIVISION_ROUNDS, SUBDIVISION_VARIANCE, rng)
            jx, jy = rng.gauss(0, radius / 10), rng.gauss(0, radius / 10)
            tint = Color.from_hsb(rng.gauss(zone_hue, 5) % 360, saturation, 90)
            _multiply(paper, [(cx + jx + x, cy + jy + y) for x, y in form],
                      np.array(tint.rgb, dtype=np.float64) / 255.0, alpha)

    logger.debug('Watercolor background: %d splotches, %d layers each', count, layers)
    alpha_channel = np.ones((height, width, 1), dtype=np.float64)
    return Surface.from_array(np.concatenate([paper, alpha_channel], axis=-1) * 255)
