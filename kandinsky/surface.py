"""
Kandinsky Surface
=================
Pillow-backed RGBA drawing surface.

Every primitive renders into a small transparent patch covering its
bounding box and is then alpha-composited onto the surface, so
translucent strokes accumulate the way ink does on an offscreen canvas.
"""

import base64
import io
import math

import numpy as np
from PIL import Image, ImageDraw

ARC_RESOLUTION = 64


def _rgba(color):
    return color.rgba if hasattr(color, 'rgba') else tuple(int(c) for c in color)


def _width(weight):
    return max(1, int(round(weight)))


def arc_points(center, radius, start, stop, segments=None):
    """Points along a circular arc, angles in radians, clockwise on screen"""
    cx, cy = center
    sweep = stop - start
    if segments is None:
        segments = max(8, int(ARC_RESOLUTION * abs(sweep) / (2 * math.pi)))
    return [(cx + math.cos(start + sweep * i / segments) * radius,
             cy + math.sin(start + sweep * i / segments) * radius)
            for i in range(segments + 1)]


def _color_ramp(t, stops):
    """Interpolate (offset, rgba) stops over an array of positions"""
    offsets = [offset for offset, _ in stops]
    colors = np.array([_rgba(color) for _, color in stops], dtype=np.float32)
    return np.stack([np.interp(t, offsets, colors[:, ch]) for ch in range(4)], axis=-1)


class Surface:
    def __init__(self, width, height, fill=(0, 0, 0, 0)):
        self.image = Image.new('RGBA', (int(width), int(height)), _rgba(fill))

    @classmethod
    def from_image(cls, image):
        surface = cls(1, 1)
        surface.image = image.convert('RGBA')
        return surface

    @classmethod
    def from_array(cls, array):
        return cls.from_image(Image.fromarray(np.clip(array, 0, 255).astype(np.uint8)))

    @property
    def width(self):
        return self.image.width

    @property
    def height(self):
        return self.image.height

    @property
    def size(self):
        return self.image.size

    def copy(self):
        return Surface.from_image(self.image.copy())

    def resized(self, width, height):
        """Best-effort rescale of the current content onto a new extent"""
        return Surface.from_image(self.image.resize((int(width), int(height)), Image.Resampling.BILINEAR))

    def composite(self, other):
        self.image.alpha_composite(other.image)

    def pixel(self, x, y):
        return self.image.getpixel((int(x), int(y)))

    # -------------------------------------------------------------------------
    # Patch plumbing
    # -------------------------------------------------------------------------

    def _box(self, points, pad):
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        x0 = max(0, int(math.floor(min(xs) - pad)))
        y0 = max(0, int(math.floor(min(ys) - pad)))
        x1 = min(self.width, int(math.ceil(max(xs) + pad)) + 1)
        y1 = min(self.height, int(math.ceil(max(ys) + pad)) + 1)
        if x1 <= x0 or y1 <= y0:
            return None
        return x0, y0, x1, y1

    def _render(self, points, pad, paint):
        box = self._box(points, pad)
        if box is None:
            return
        x0, y0, x1, y1 = box
        patch = Image.new('RGBA', (x1 - x0, y1 - y0), (0, 0, 0, 0))
        paint(ImageDraw.Draw(patch), lambda pts: [(x - x0, y - y0) for x, y in pts])
        self.image.alpha_composite(patch, dest=(x0, y0))

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    def line(self, p0, p1, color, weight=1):
        if math.dist(p0, p1) < 1e-9:
            return
        self.polyline([p0, p1], color, weight)

    def polyline(self, points, color, weight=1, closed=False):
        if len(points) < 2:
            return
        width = _width(weight)
        rgba = _rgba(color)
        pts = list(points) + ([points[0]] if closed else [])

        def paint(draw, shift):
            local = shift(pts)
            draw.line(local, fill=rgba, width=width, joint='curve')
            if width > 2 and not closed:
                r = width / 2
                for x, y in (local[0], local[-1]):
                    draw.ellipse([x - r, y - r, x + r, y + r], fill=rgba)

        self._render(pts, width, paint)

    def polygon(self, points, fill=None, outline=None, weight=1):
        if len(points) < 3:
            return
        if fill is not None:
            rgba = _rgba(fill)
            self._render(points, 1, lambda draw, shift: draw.polygon(shift(points), fill=rgba))
        if outline is not None:
            self.polyline(points, outline, weight, closed=True)

    def ellipse(self, center, radius, fill=None, outline=None, weight=1):
        if radius <= 0:
            return
        cx, cy = center
        corners = [(cx - radius, cy - radius), (cx + radius, cy + radius)]
        if fill is not None:
            rgba = _rgba(fill)
            self._render(corners, 1, lambda draw, shift: draw.ellipse(shift(corners), fill=rgba))
        if outline is not None:
            rgba = _rgba(outline)
            width = _width(weight)
            self._render(corners, width,
                         lambda draw, shift: draw.ellipse(shift(corners), outline=rgba, width=width))

    def arc(self, center, radius, start, stop, color, weight=1):
        if radius <= 0:
            return
        self.polyline(arc_points(center, radius, start, stop), color, weight)

    def brush_segment(self, p0, p1, color, weight, pressure=0.0):
        """One pressure-modulated brush step with two thin shadow strokes"""
        length = math.dist(p0, p1)
        if length < 1e-9:
            return
        r = weight * (1 + pressure * 0.5)
        diff = weight * 0.5
        px = -(p1[1] - p0[1]) / length * diff
        py = (p1[0] - p0[0]) / length * diff
        self.polyline([p0, p1], color, r)
        self.polyline([(p0[0] + px, p0[1] + py), (p1[0] + px, p1[1] + py)], color, r * 0.4)
        self.polyline([(p0[0] - px, p0[1] - py), (p1[0] - px, p1[1] - py)], color, r * 0.4)

    # -------------------------------------------------------------------------
    # Gradients
    # -------------------------------------------------------------------------

    def _gradient_fill(self, points, positions):
        box = self._box(points, 1)
        if box is None:
            return
        x0, y0, x1, y1 = box
        mask = Image.new('L', (x1 - x0, y1 - y0), 0)
        ImageDraw.Draw(mask).polygon([(x - x0, y - y0) for x, y in points], fill=255)
        ys, xs = np.mgrid[y0:y1, x0:x1].astype(np.float32) + 0.5
        rgba = positions(xs, ys)
        rgba[..., 3] *= np.asarray(mask, dtype=np.float32) / 255.0
        patch = Image.fromarray(np.clip(rgba, 0, 255).astype(np.uint8))
        self.image.alpha_composite(patch, dest=(x0, y0))

    def linear_gradient(self, points, start, end, stops):
        """Fill a polygon with a linear gradient running from start to end"""
        if len(points) < 3:
            return
        sx, sy = start
        dx, dy = end[0] - sx, end[1] - sy
        denom = dx * dx + dy * dy

        def positions(xs, ys):
            if denom == 0:
                t = np.zeros_like(xs)
            else:
                t = np.clip(((xs - sx) * dx + (ys - sy) * dy) / denom, 0.0, 1.0)
            return _color_ramp(t, stops)

        self._gradient_fill(points, positions)

    def radial_gradient(self, center, inner, outer, stops):
        """Fill a disc of radius outer; the ramp runs from inner to outer"""
        if outer <= 0:
            return
        cx, cy = center
        span = max(outer - inner, 1e-9)

        def positions(xs, ys):
            t = np.clip((np.hypot(xs - cx, ys - cy) - inner) / span, 0.0, 1.0)
            return _color_ramp(t, stops)

        self._gradient_fill(arc_points(center, outer, 0, 2 * math.pi), positions)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def to_png(self):
        buffer = io.BytesIO()
        self.image.save(buffer, format='PNG')
        return buffer.getvalue()

    def to_base64(self):
        return base64.b64encode(self.to_png()).decode('utf-8')
