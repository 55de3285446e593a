"""
Kandinsky Motifs
================
Steppable animations. Each motif is fully parameterized at construction
and draws one increment per step() call into the surface it is handed,
returning False on the call that completes it.
"""

import math
from typing import Protocol

from .colors import INK, Color

LATTICE_LINE = Color(0, 0, 15)


class Steppable(Protocol):
    kind: str

    def step(self, surface) -> bool:
        """Draw one increment; False once the motif is complete."""
        ...


def _lerp(a, b, t):
    return a + (b - a) * t


# =============================================================================
# Parametric curves
# =============================================================================

class CurveAnim:
    """A parametric curve revealed one sub-segment per step"""

    kind = 'curve'

    def __init__(self, steps, color=INK, weight=1.0, brush=False):
        assert steps > 0, 'step budget must be positive'
        self.steps = steps
        self.i = 0
        self.color = color
        self.weight = weight
        self.brush = brush

    def point(self, t):
        raise NotImplementedError

    def step(self, surface):
        t0 = self.i / self.steps
        t1 = (self.i + 1) / self.steps
        a, b = self.point(t0), self.point(t1)
        if self.brush:
            # thin at both ends, full pressure mid-stroke
            pressure = math.sin(math.pi * (t0 + t1) / 2)
            surface.brush_segment(a, b, self.color, self.weight, pressure)
        else:
            surface.line(a, b, self.color, self.weight)
        self.i += 1
        return self.i < self.steps


class LineAnim(CurveAnim):
    kind = 'line'

    def __init__(self, start, end, steps, color=INK, weight=1.0, brush=False):
        super().__init__(steps, color, weight, brush)
        self.start = start
        self.end = end

    def point(self, t):
        return (_lerp(self.start[0], self.end[0], t), _lerp(self.start[1], self.end[1], t))


class ArcAnim(CurveAnim):
    kind = 'arc'

    def __init__(self, center, radius, start_angle, sweep, steps, color=INK.with_alpha(0.6), weight=1.0):
        super().__init__(steps, color, weight)
        self.center = center
        self.radius = radius
        self.start_angle = start_angle
        self.sweep = sweep

    def point(self, t):
        angle = self.start_angle + self.sweep * t
        return (self.center[0] + math.cos(angle) * self.radius,
                self.center[1] + math.sin(angle) * self.radius)


class BezierAnim(CurveAnim):
    kind = 'bezier'

    def __init__(self, p0, p1, p2, p3, steps, color=INK, weight=1.0, brush=False):
        super().__init__(steps, color, weight, brush)
        self.points = (p0, p1, p2, p3)

    def point(self, t):
        p0, p1, p2, p3 = self.points
        u = 1 - t
        a, b, c, d = u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t
        return (a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
                a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1])


# =============================================================================
# Spiral
# =============================================================================

class SpiralAnim:
    """Archimedean spiral revealed point by point.

    pace is an optional callable returning the current global slowdown
    factor; it scales how far the reveal advances per call while the
    step budget stays fixed. The final call reveals the whole spiral.
    """

    kind = 'spiral'

    def __init__(self, center, steps, revolutions, radius, color, weight=1.0, pace=None):
        assert steps > 0, 'step budget must be positive'
        self.center = center
        self.steps = steps
        self.color = color
        self.weight = weight
        self.pace = pace
        self.i = 0
        self.progress = 0.0
        self.points = []
        for k in range(steps + 1):
            angle = 2 * math.pi * revolutions * k / steps
            r = radius * k / steps
            self.points.append((math.cos(angle) * r, math.sin(angle) * r))

    def revealed(self):
        """Points drawn so far, including the interpolated partial one"""
        whole = int(math.floor(self.progress))
        pts = self.points[:whole + 1]
        partial = self.progress - whole
        if whole < self.steps and partial > 0:
            (ax, ay), (bx, by) = self.points[whole], self.points[whole + 1]
            pts.append((_lerp(ax, bx, partial), _lerp(ay, by, partial)))
        return pts

    def step(self, surface):
        self.i += 1
        modifier = self.pace() if self.pace else 1.0
        self.progress = min(float(self.steps), self.progress + modifier)
        if self.i >= self.steps:
            self.progress = float(self.steps)
        cx, cy = self.center
        surface.polyline([(cx + x, cy + y) for x, y in self.revealed()], self.color, self.weight)
        return self.i < self.steps


# =============================================================================
# Lattice
# =============================================================================

class LatticeAnim:
    """Parallelogram grid: cells one per step, then each line family.

    A step only executes once delay calls have passed since the last
    executed one. on_complete fires once, on the terminating step.
    """

    kind = 'lattice'

    def __init__(self, center, n1, n2, angle1, angle2, spacing, cell_colors, delay=12, on_complete=None):
        assert n1 >= 0 and n2 >= 0 and spacing > 0
        self.center = center
        self.n1, self.n2 = n1, n2
        self.angle1, self.angle2 = angle1, angle2
        self.spacing = spacing
        self.delay = delay
        self.on_complete = on_complete
        self.v1 = (math.cos(angle1) * spacing, math.sin(angle1) * spacing)
        self.v2 = (math.cos(angle2) * spacing, math.sin(angle2) * spacing)

        self.cells = []
        for i in range(-n1, n1 + 1):
            for j in range(-n2, n2 + 1):
                poly = [self._at(i, j), self._at(i + 1, j), self._at(i + 1, j + 1), self._at(i, j + 1)]
                self.cells.append(poly)
        assert len(cell_colors) == len(self.cells), 'one colour per cell'
        self.cell_colors = list(cell_colors)

        self.stage = 0
        self.cell_index = 0
        self.l1 = -n1
        self.l2 = -n2
        self._ticks = 0
        self._last = 0
        self.done = False

    def _at(self, i, j):
        return (self.center[0] + self.v1[0] * i + self.v2[0] * j,
                self.center[1] + self.v1[1] * i + self.v2[1] * j)

    @property
    def total_steps(self):
        """Executed steps from start to completion"""
        return len(self.cells) + 2 * (self.n1 + self.n2 + 1)

    def step(self, surface):
        self._ticks += 1
        if self._ticks - self._last < self.delay:
            return True
        self._last = self._ticks

        if self.stage == 0:
            surface.polygon(self.cells[self.cell_index], fill=self.cell_colors[self.cell_index])
            self.cell_index += 1
            if self.cell_index >= len(self.cells):
                self.stage = 1
        elif self.stage == 1:
            # family 1 runs along v2 through multiples of v1
            surface.line(self._at(self.l1, -self.n2 - 0.2), self._at(self.l1, self.n2 + 1.2), LATTICE_LINE, 1)
            self.l1 += 1
            if self.l1 > self.n1:
                self.stage = 2
        else:
            surface.line(self._at(-self.n1 - 0.2, self.l2), self._at(self.n1 + 1.2, self.l2), LATTICE_LINE, 1)
            self.l2 += 1

        if self.stage >= 2 and self.l2 > self.n2:
            self.done = True
            if self.on_complete:
                self.on_complete()
            return False
        return True
