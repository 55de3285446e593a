"""
Kandinsky Shapes
================
Persistent compound shapes. Unlike the steppable motifs a shape never
completes: every frame it eases toward its target size and is redrawn
in full.
"""

import math
from typing import Protocol

from .colors import Color, colorful, contrasting_color, pick_colorful, pick_distinct, shape_color
from .config import SHAPE_SPEED_MAX, SHAPE_SPEED_MIN, SKELETON_COUNT, map_range
from .surface import arc_points

BLACK = Color(0, 0, 0)

ORNAMENT_TYPES = (
    'circle', 'rect', 'triangle', 'semiCircle',
    'openRect', 'openTriangle', 'openSemiCircle', 'openSemiCircle', 'openSemiCircle',
    'halo', 'halo',
    'concentricCircle', 'concentricArc', 'squiggle',
    'arc',
)
SKELETON_TYPES = ('openRect', 'openTriangle')

# (kind, style) for each raw type; anything missing is (raw, 'filled')
NORMALIZED = {
    'halo': ('circle', 'halo'),
    'openRect': ('rect', 'open'),
    'openTriangle': ('triangle', 'open'),
    'openSemiCircle': ('semiCircle', 'open'),
    'concentricCircle': ('concentricCircle', 'normal'),
    'concentricArc': ('concentricArc', 'normal'),
    'squiggle': ('squiggle', 'normal'),
    'arc': ('arc', 'normal'),
}

# Below this fraction of the base unit an open rect/triangle reads as closed
MIN_OPEN_FRACTION = 0.06
SQUIGGLE_SEGMENTS = 15
FADE_STOPS = (0.0, 0.9, 1.0)


class Easing(Protocol):
    t: float

    def display(self, surface, speed_modifier: float = 1.0) -> None:
        """Advance the easing parameter and draw at the current size."""
        ...


def ease_out_cubic(t):
    return 1 - (1 - t) ** 3


def _fade(color):
    clear = color.with_alpha(0)
    return [(FADE_STOPS[0], color), (FADE_STOPS[1], clear), (FADE_STOPS[2], clear)]


class KandinskyShape:
    def __init__(self, x, y, index, target_size, speed, color, rotation, stroke_weight,
                 kind, style, color2=None, ring_colors=(), gradient_angles=(),
                 gradient_angle=0.0, arc_start=0.0, arc_sweep=math.pi):
        self.x, self.y = x, y
        self.index = index
        self.target_size = target_size
        self.speed = speed
        self.color = color
        self.color2 = color2 or color
        self.rotation = rotation
        self.stroke_weight = stroke_weight
        self.kind = kind
        self.style = style
        self.ring_colors = list(ring_colors)
        self.gradient_angles = list(gradient_angles)
        self.gradient_angle = gradient_angle
        self.arc_start = arc_start
        self.arc_sweep = arc_sweep
        self.t = 0.0

        self.squiggle = []
        if kind == 'squiggle':
            length = target_size * 2
            for i in range(SQUIGGLE_SEGMENTS + 1):
                self.squiggle.append((map_range(i, 0, SQUIGGLE_SEGMENTS, -length / 2, length / 2),
                                      math.sin(i / SQUIGGLE_SEGMENTS * math.pi) * target_size * 0.2))

    @classmethod
    def spawn(cls, rng, x, y, index, palette, base_unit, config, size=None, angle=None, first_color=None):
        """Roll every random parameter of a new shape.

        The first SKELETON_COUNT indices are skeletons: large, open, and
        coloured against first_color when it is given.
        """
        skeleton = index <= SKELETON_COUNT
        base = size or rng.uniform(base_unit * 0.05, base_unit * 0.25)
        if skeleton:
            factor = rng.uniform(*config.skeleton_scale)
        else:
            factor = map_range(index, 3, 100, config.ornament_scale[0], config.ornament_scale[1], clamp=True)
        target = base * factor

        if (not skeleton or config.skeleton_tangent) and rng.random() < 0.5:
            # the anchor ends up on the final circumference
            theta = rng.uniform(0, 2 * math.pi)
            x += target / 2 * math.cos(theta)
            y += target / 2 * math.sin(theta)

        max_speed = map_range(index, 3, 50, SHAPE_SPEED_MAX, SHAPE_SPEED_MAX * 2.5, clamp=True)
        speed = rng.uniform(SHAPE_SPEED_MIN, max_speed)

        vivid = colorful(palette)
        if skeleton:
            if first_color is None:
                color = pick_colorful(rng, palette)
            elif config.second_color_mode == 'hue_shift':
                color = contrasting_color(rng, first_color)
            else:
                color = pick_distinct(rng, palette, first_color)
            color2 = color
        elif config.ornament_color_mode == 'rogue':
            color = shape_color(rng, vivid or None)
            color2 = shape_color(rng, vivid or None, avoid=color)
        else:
            color = pick_colorful(rng, palette)
            color2 = pick_colorful(rng, palette)

        rotation = angle if angle is not None else rng.uniform(0, 2 * math.pi)
        stroke_weight = target * rng.uniform(0.005, 0.02)

        raw = rng.choice(SKELETON_TYPES if skeleton else ORNAMENT_TYPES)
        kind, style = NORMALIZED.get(raw, (raw, 'filled'))
        extras = {}

        if style == 'halo':
            source = [c for c in vivid if c.brightness < 75 and c.s > 30] or vivid
            rings = []
            for _ in range(rng.randint(3, 5)):
                rings.append(shape_color(rng, source or None, avoid=rings[-1] if rings else None))
            extras['ring_colors'] = rings
            extras['gradient_angles'] = [rng.uniform(0, 2 * math.pi) for _ in rings]
        elif kind in ('concentricCircle', 'concentricArc'):
            rings = []
            for _ in range(rng.randint(3, 5)):
                rings.append(shape_color(rng, vivid or None, avoid=rings[-1] if rings else None))
            extras['ring_colors'] = rings
            if kind == 'concentricArc':
                extras['arc_start'] = rng.uniform(0, 2 * math.pi)
                extras['arc_sweep'] = rng.uniform(math.pi / 3, 2 * math.pi)
        elif kind == 'arc':
            extras['arc_start'] = rng.uniform(0, 2 * math.pi)
            extras['arc_sweep'] = rng.uniform(math.pi / 3, math.pi)
        elif style == 'open' and kind in ('rect', 'triangle'):
            extras['gradient_angle'] = rng.uniform(0, 2 * math.pi)
            if target < base_unit * MIN_OPEN_FRACTION:
                style = 'filled'

        return cls(x, y, index, target, speed, color, rotation, stroke_weight,
                   kind, style, color2=color2, **extras)

    @property
    def skeleton(self):
        return self.index <= SKELETON_COUNT

    @property
    def size(self):
        return self.target_size * ease_out_cubic(min(self.t, 1.0))

    def _world(self, points):
        c, s = math.cos(self.rotation), math.sin(self.rotation)
        return [(self.x + px * c - py * s, self.y + px * s + py * c) for px, py in points]

    def _direction(self, angle):
        return (math.cos(angle), math.sin(angle))

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def display(self, surface, speed_modifier=1.0):
        if self.t < 1:
            self.t = min(1.0, self.t + self.speed * speed_modifier)
        s = self.size
        if s <= 0:
            return

        painters = {
            'circle': self._draw_circle,
            'semiCircle': self._draw_semicircle,
            'rect': self._draw_rect,
            'triangle': self._draw_triangle,
            'concentricCircle': self._draw_concentric_circle,
            'concentricArc': self._draw_concentric_arc,
            'squiggle': self._draw_squiggle,
            'arc': self._draw_arc,
        }
        painters[self.kind](surface, s)

    def _draw_circle(self, surface, s):
        center = (self.x, self.y)
        if self.style != 'halo':
            surface.ellipse(center, s / 2, fill=self.color, outline=BLACK, weight=self.stroke_weight)
            return

        rings = len(self.ring_colors)
        for i, ring in enumerate(self.ring_colors):
            radius = (s / 2) * ((rings - i) / rings)
            final = ring.with_alpha(0.85)
            if i == 0:
                # outermost ring fades out at its rim
                surface.radial_gradient(center, radius * 0.7, radius,
                                        [(0.0, final), (1.0, final.with_alpha(0))])
            else:
                dx, dy = self._direction(self.gradient_angles[i] + self.rotation)
                surface.linear_gradient(arc_points(center, radius, 0, 2 * math.pi),
                                        (self.x - dx * radius, self.y - dy * radius),
                                        (self.x + dx * radius, self.y + dy * radius),
                                        [(0.0, final), (1.0, final.darker())])

    def _draw_semicircle(self, surface, s):
        r = s / 2
        outline = self._world(arc_points((0, 0), r, 0, math.pi))
        if self.style == 'open':
            peak, base = self._world([(0, r), (0, 0)])
            surface.linear_gradient(outline, peak, base, _fade(self.color))
        else:
            surface.polygon(outline, fill=self.color)
        surface.polyline(outline, BLACK, self.stroke_weight)

    def _open_polygon(self, surface, verts, open_index, start):
        """Gradient-fill verts from start toward the open edge, stroke the rest"""
        n = len(verts)
        a, b = verts[open_index], verts[(open_index + 1) % n]
        end = ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)
        world = self._world(verts)
        start_w, end_w = self._world([start, end])
        surface.linear_gradient(world, start_w, end_w, _fade(self.color))
        for i in range(n):
            if i != open_index:
                surface.line(world[i], world[(i + 1) % n], BLACK, self.stroke_weight)

    def _draw_rect(self, surface, s):
        w, h = s, s * 0.6
        verts = [(-w / 2, -h / 2), (w / 2, -h / 2), (w / 2, h / 2), (-w / 2, h / 2)]
        if self.style != 'open':
            surface.polygon(self._world(verts), fill=self.color, outline=BLACK, weight=self.stroke_weight)
            return
        normals = [(0, -1), (1, 0), (0, 1), (-1, 0)]
        dx, dy = self._direction(self.gradient_angle)
        open_index = max(range(4), key=lambda i: normals[i][0] * dx + normals[i][1] * dy)
        a, b = verts[(open_index + 2) % 4], verts[(open_index + 3) % 4]
        self._open_polygon(surface, verts, open_index, ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2))

    def _draw_triangle(self, surface, s):
        hgt = s * math.sqrt(3) / 2
        verts = [(-s / 2, hgt / 3), (s / 2, hgt / 3), (0, -2 * hgt / 3)]
        if self.style != 'open':
            surface.polygon(self._world(verts), fill=self.color, outline=BLACK, weight=self.stroke_weight)
            return
        dx, dy = self._direction(self.gradient_angle)

        def alignment(i):
            a, b = verts[i], verts[(i + 1) % 3]
            return (a[0] + b[0]) / 2 * dx + (a[1] + b[1]) / 2 * dy

        open_index = max(range(3), key=alignment)
        self._open_polygon(surface, verts, open_index, verts[(open_index + 2) % 3])

    def _draw_concentric_circle(self, surface, s):
        rings = len(self.ring_colors)
        for i in range(rings, 0, -1):
            surface.ellipse((self.x, self.y), (s / 2) * (i / rings), fill=self.ring_colors[i - 1])

    def _draw_concentric_arc(self, surface, s):
        rings = len(self.ring_colors)
        start = self.arc_start + self.rotation
        for i in range(rings, 0, -1):
            surface.arc((self.x, self.y), (s / 2) * (i / rings), start, start + self.arc_sweep,
                        self.ring_colors[i - 1], self.stroke_weight)

    def _draw_squiggle(self, surface, s):
        k = s / self.target_size
        surface.polyline(self._world([(x * k, y * k) for x, y in self.squiggle]), self.color, self.stroke_weight)

    def _draw_arc(self, surface, s):
        start = self.arc_start + self.rotation
        surface.arc((self.x, self.y), s / 2, start, start + self.arc_sweep, self.color, self.stroke_weight)
