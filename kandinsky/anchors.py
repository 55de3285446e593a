"""
Kandinsky Anchors
=================
The fixed set of trigger points a drag must land near, plus the
vanishing points perspective strokes lean toward.

Anchors keep their position relative to the canvas extent so a resize
can put them back in the same place on the new canvas.
"""

import math
from dataclasses import dataclass

FIXED_VANISHING_POINTS = ((0.5, -0.5), (1.5, 0.5), (-0.5, 0.5))


@dataclass(frozen=True)
class Anchor:
    x: float
    y: float
    rx: float
    ry: float

    @property
    def position(self):
        return (self.x, self.y)

    def at_extent(self, width, height):
        return Anchor(self.rx * width, self.ry * height, self.rx, self.ry)


class AnchorField:
    """Fixed-cardinality anchor set with a nearest-within-radius query"""

    def __init__(self, anchors, width, height):
        self.anchors = list(anchors)
        self.width = width
        self.height = height

    @classmethod
    def scatter(cls, rng, count, width, height, margin):
        anchors = []
        for _ in range(count):
            x = rng.uniform(margin, width - margin) if width > 2 * margin else width / 2
            y = rng.uniform(margin, height - margin) if height > 2 * margin else height / 2
            anchors.append(Anchor(x, y, x / width, y / height))
        return cls(anchors, width, height)

    @classmethod
    def grid(cls, count, width, height, margin):
        """Evenly spaced anchors over the inset canvas, row by row"""
        cols = max(1, math.ceil(math.sqrt(count * width / height)))
        rows = max(1, math.ceil(count / cols))
        inner_w = max(0.0, width - 2 * margin)
        inner_h = max(0.0, height - 2 * margin)
        anchors = []
        for j in range(rows):
            for i in range(cols):
                if len(anchors) == count:
                    break
                x = margin + inner_w * ((i + 0.5) / cols) if inner_w else width / 2
                y = margin + inner_h * ((j + 0.5) / rows) if inner_h else height / 2
                anchors.append(Anchor(x, y, x / width, y / height))
        return cls(anchors, width, height)

    def __len__(self):
        return len(self.anchors)

    def __iter__(self):
        return iter(self.anchors)

    def nearest(self, point, max_distance):
        """Closest anchor strictly within max_distance, or None"""
        px, py = point
        best, best_d = None, None
        for anchor in self.anchors:
            d = math.hypot(px - anchor.x, py - anchor.y)
            if d < max_distance and (best_d is None or d < best_d):
                best, best_d = anchor, d
        return best

    def choice(self, rng):
        return rng.choice(self.anchors)

    def relayout(self, width, height):
        """Recompute absolute positions from the stored relative ones"""
        self.anchors = [a.at_extent(width, height) for a in self.anchors]
        self.width = width
        self.height = height


def vanishing_points(rng, mode='fixed'):
    """Relative vanishing points for perspective strokes"""
    if mode == 'fixed':
        return list(FIXED_VANISHING_POINTS)
    points = []
    if rng.random() < 0.5:
        points.append((rng.random(), rng.random()))
        if rng.random() < 0.3:
            points.append((rng.random(), rng.random()))
    return points
