"""
Kandinsky Dispatch
==================
Turns pointer drags into motifs.

One decision per accepted drag: a skeleton while fewer than two exist,
otherwise a rare emphasized stroke, otherwise one draw against the
cumulative dispatch table. Capped branches fall through to the next
entry; whatever is left over becomes an ornament.
"""

import logging
import math
import time

from .colors import Color, pick_colorful
from .config import SKELETON_COUNT, SMALL_SCREEN, SPIRAL_SPEED_FLOOR
from .motifs import ArcAnim, BezierAnim, LatticeAnim, LineAnim, SpiralAnim
from .shapes import KandinskyShape

logger = logging.getLogger(__name__)

THICK_INK = Color(0, 0, 15, 0.85)
MIN_LATTICE_ANGLE = math.radians(35)
MAX_LATTICE_TURN = 2 * math.pi / 3
SMALL_LATTICE_PAIRS = ((1, 1), (1, 2), (2, 1))
LATTICE_PAIRS = ((1, 2), (1, 3), (1, 4), (2, 2), (2, 3))


def monotonic_ms():
    return time.monotonic() * 1000.0


class Dispatcher:
    def __init__(self, session):
        self.session = session
        self.builders = {
            'line': self._spawn_line,
            'arc': self._spawn_arc,
            'bezier': self._spawn_bezier,
            'lattice': self._spawn_lattice,
            'spiral': self._spawn_spiral,
        }

    @property
    def rng(self):
        return self.session.rng

    @property
    def config(self):
        return self.session.config

    def handle_drag(self, x, y, px=None, py=None, t=None):
        """Dispatch at most one motif for a drag; returns its kind or None"""
        session = self.session
        if session.composition_finished:
            return None

        now = monotonic_ms() if t is None else t
        if session.last_drag_time is not None and now - session.last_drag_time < self.config.debounce_ms:
            return None
        session.last_drag_time = now

        anchor = session.anchors.nearest((x, y), self.config.trigger_dist)
        if anchor is None:
            return None

        session.drag_count += 1
        angle = None
        if px is not None and py is not None and (x, y) != (px, py):
            angle = math.atan2(y - py, x - px)

        kind = self._dispatch(anchor, angle)
        logger.debug('Drag %d at (%.0f, %.0f) spawned %s', session.drag_count, x, y, kind)
        session.check_completion()
        return kind

    def _dispatch(self, anchor, angle):
        session = self.session
        if len(session.skeletons) < SKELETON_COUNT:
            return self._spawn_skeleton(anchor, angle)

        if session.thick_stroke_available() and self.rng.random() < self.config.thick_stroke_chance:
            return self._spawn_thick_stroke(anchor)

        r = self.rng.random()
        for cutoff, kind in self.config.dispatch_table():
            if r < cutoff and (kind != 'lattice' or session.lattice_available()):
                return self.builders[kind](anchor)
        return self._spawn_ornament(anchor)

    # -------------------------------------------------------------------------
    # Shapes
    # -------------------------------------------------------------------------

    def _spawn_skeleton(self, anchor, angle):
        session = self.session
        unit = session.base_unit
        size = self.rng.uniform(unit * 0.3, unit * 0.45)
        first = session.first_shape_colors[0] if session.first_shape_colors else None
        shape = KandinskyShape.spawn(self.rng, anchor.x, anchor.y, session.next_shape_index(),
                                     session.palette, unit, self.config,
                                     size=size, angle=angle, first_color=first)
        session.first_shape_colors.append(shape.color)
        session.skeletons.append(shape)
        return 'skeleton'

    def _spawn_ornament(self, anchor):
        session = self.session
        shape = KandinskyShape.spawn(self.rng, anchor.x, anchor.y, session.next_shape_index(),
                                     session.palette, session.base_unit, self.config)
        session.ornaments.append(shape)
        return 'ornament'

    # -------------------------------------------------------------------------
    # Strokes
    # -------------------------------------------------------------------------

    def _ink_list(self):
        session = self.session
        return session.foreground_anims if self.rng.random() < self.config.foreground_chance else session.line_anims

    def _vanishing_point(self):
        points = self.session.vanishing_points
        if points and self.rng.random() < self.config.perspective_chance:
            return self.rng.choice(points)
        return None

    def _spawn_thick_stroke(self, anchor):
        session = self.session
        unit = session.base_unit
        weight = self.rng.uniform(unit * 0.02, unit * 0.05)
        if self.rng.random() < 0.5:
            end = session.anchors.choice(self.rng).position
            motif, kind = LineAnim(anchor.position, end, self.config.line_steps,
                                   THICK_INK, weight, brush=True), 'thick_line'
        else:
            c1, c2, d = (session.anchors.choice(self.rng).position for _ in range(3))
            motif, kind = BezierAnim(anchor.position, c1, c2, d, self.config.bezier_steps,
                                     THICK_INK, weight, brush=True), 'thick_bezier'
        session.foreground_anims.append(motif)
        session.thick_stroke_count += 1
        return kind

    def _spawn_line(self, anchor):
        session = self.session
        target = self._ink_list()
        unit = session.base_unit
        end = None
        vp = self._vanishing_point()
        if vp is not None:
            dx, dy = vp[0] - anchor.x, vp[1] - anchor.y
            length = math.hypot(dx, dy)
            if length > 0:
                reach = session.width * 2
                end = (anchor.x + dx / length * reach, anchor.y + dy / length * reach)
        if end is None:
            end = session.anchors.choice(self.rng).position
        weight = self.rng.uniform(unit * 0.001, unit * 0.005)
        target.append(LineAnim(anchor.position, end, self.config.line_steps, weight=weight))
        return 'line'

    def _spawn_arc(self, anchor):
        unit = self.session.base_unit
        radius = self.rng.uniform(unit * 0.1, unit * 0.3)
        start = self.rng.uniform(0, 2 * math.pi)
        sweep = self.rng.uniform(math.pi * 0.3, math.pi * 0.8)
        weight = self.rng.uniform(unit * 0.001, unit * 0.005)
        self.session.line_anims.append(ArcAnim(anchor.position, radius, start, sweep,
                                               self.config.arc_steps, weight=weight))
        return 'arc'

    def _spawn_bezier(self, anchor):
        session = self.session
        target = self._ink_list()
        weight = self.rng.uniform(session.base_unit * 0.0005, session.base_unit * 0.0015)
        vp = self._vanishing_point()
        if vp is not None:
            c1, d = (session.anchors.choice(self.rng).position for _ in range(2))
            points = (anchor.position, c1, d, vp)
        else:
            c1, c2, d = (session.anchors.choice(self.rng).position for _ in range(3))
            points = (anchor.position, c1, c2, d)
        target.append(BezierAnim(*points, self.config.bezier_steps, weight=weight))
        return 'bezier'

    # -------------------------------------------------------------------------
    # Lattice & spiral
    # -------------------------------------------------------------------------

    def _spawn_lattice(self, anchor):
        session = self.session
        rng = self.rng
        angle1 = rng.uniform(0, 2 * math.pi)
        # grid lines always cross at MIN_LATTICE_ANGLE to 90 degrees
        angle2 = angle1 + rng.choice((-1, 1)) * rng.uniform(MIN_LATTICE_ANGLE, MAX_LATTICE_TURN)

        small = session.base_unit < SMALL_SCREEN
        n1, n2 = rng.choice(SMALL_LATTICE_PAIRS if small else LATTICE_PAIRS)
        if rng.random() < 0.5:
            n1, n2 = n2, n1
        spacing = rng.uniform(session.base_unit * 0.02, session.base_unit * 0.05)
        fill_alpha = rng.uniform(0.6, 0.9)
        cells = (2 * n1 + 1) * (2 * n2 + 1)
        colors = [rng.choice(session.palette).with_alpha(fill_alpha) for _ in range(cells)]

        session.lattice_anims.append(LatticeAnim(anchor.position, n1, n2, angle1, angle2, spacing, colors,
                                                 delay=self.config.lattice_delay,
                                                 on_complete=session.record_lattice_completion))
        return 'lattice'

    def _spawn_spiral(self, anchor):
        session = self.session
        rng = self.rng
        unit = session.base_unit
        color = pick_colorful(rng, session.palette).with_alpha(0.8)
        spiral = SpiralAnim(anchor.position, self.config.spiral_steps,
                            revolutions=rng.uniform(2, 5), radius=rng.uniform(unit * 0.02, unit * 0.05),
                            color=color, weight=rng.uniform(unit * 0.0005, unit * 0.0015),
                            pace=lambda: session.speed_modifier(SPIRAL_SPEED_FLOOR))
        session.line_anims.append(spiral)
        return 'spiral'


class TouchTracker:
    """Pairs each move with the previous pointer position.

    Mouse and touch input both go through here so the dispatcher always
    sees a (previous, current) pair. Multi-touch moves are ignored.
    """

    def __init__(self, dispatcher):
        self.dispatcher = dispatcher
        self.previous = None

    def press(self, x, y):
        self.previous = (x, y)

    def move(self, x, y, t=None, touches=1):
        if touches > 1 or self.previous is None:
            return None
        px, py = self.previous
        kind = self.dispatcher.handle_drag(x, y, px, py, t)
        self.previous = (x, y)
        return kind

    def release(self):
        self.previous = None
