"""Tests for compositor.py: stacking, stepping, halting and resize."""

import random

import numpy as np

from kandinsky.compositor import FrameCompositor
from kandinsky.dispatch import Dispatcher
from kandinsky.session import SessionState

from conftest import HEIGHT, WIDTH

LINE_ONLY = (('line', 1.0),)


def build(config, seed=5, **overrides):
    session = SessionState(WIDTH, HEIGHT, random.Random(seed), config.with_overrides(**overrides))
    return session, Dispatcher(session), FrameCompositor(session)


def feed(session, dispatcher, count, start=0):
    anchor = session.anchors.anchors[0]
    for i in range(count):
        dispatcher.handle_drag(anchor.x, anchor.y, anchor.x - 5, anchor.y, t=(start + i + 1) * 1000)


class TestFrames:
    def test_frame_is_opaque_canvas(self, config):
        session, _, compositor = build(config)
        frame = compositor.tick()
        assert frame.size == (WIDTH, HEIGHT)
        assert np.asarray(frame.image)[..., 3].min() == 255
        assert session.frame_count == 1

    def test_lines_retire_after_their_budget(self, config):
        session, dispatcher, compositor = build(config, dispatch_weights=LINE_ONLY,
                                                thick_stroke_chance=0.0, foreground_chance=0.0,
                                                perspective_chance=1.0)
        feed(session, dispatcher, 3)
        assert len(session.line_anims) == 1
        for _ in range(config.line_steps - 1):
            compositor.tick()
        assert len(session.line_anims) == 1
        compositor.tick()
        assert session.line_anims == []
        assert compositor.ink.image.getbbox() is not None
        assert compositor.foreground.image.getbbox() is None

    def test_foreground_strokes_land_on_foreground(self, config):
        session, dispatcher, compositor = build(config, thick_stroke_chance=1.0)
        feed(session, dispatcher, 4)
        assert len(session.foreground_anims) == 2
        compositor.tick()
        assert compositor.foreground.image.getbbox() is not None

    def test_shapes_grow_each_tick(self, config):
        session, dispatcher, compositor = build(config)
        feed(session, dispatcher, 1)
        shape = session.skeletons[0]
        compositor.tick()
        first = shape.t
        compositor.tick()
        assert 0 < first < shape.t

    def test_snapshot_does_not_advance(self, config):
        session, dispatcher, compositor = build(config)
        feed(session, dispatcher, 1)
        compositor.snapshot()
        assert session.skeletons[0].t == 0

    def test_anchor_markers(self, config):
        plain = build(config)[2].render()
        marked_session, _, marked = build(config, anchor_vis_radius=4)
        frame = marked.render()
        x, y = marked_session.anchors.anchors[0].position
        assert frame.pixel(x, y) != plain.pixel(x, y)


class TestHalting:
    def test_finished_session_freezes_motion(self, config):
        session, dispatcher, compositor = build(config, cap_value=4, dispatch_weights=LINE_ONLY,
                                                thick_stroke_chance=0.0)
        feed(session, dispatcher, 4)
        assert session.composition_finished
        steps = [m.i for m in session.live_motifs]
        growth = [s.t for s in session.skeletons]
        for _ in range(3):
            compositor.tick()
        assert [m.i for m in session.live_motifs] == steps
        assert [s.t for s in session.skeletons] == growth
        assert session.frame_count == 3

    def test_keep_animating_when_not_halting(self, config):
        session, dispatcher, compositor = build(config, cap_value=4, dispatch_weights=LINE_ONLY,
                                                thick_stroke_chance=0.0, halt_on_finish=False)
        feed(session, dispatcher, 4)
        compositor.tick()
        assert all(m.i == 1 for m in session.live_motifs)


class TestResize:
    def test_preserve_rescales_ink(self, config):
        session, dispatcher, compositor = build(config, dispatch_weights=LINE_ONLY, thick_stroke_chance=0.0,
                                                foreground_chance=0.0, perspective_chance=1.0)
        feed(session, dispatcher, 3)
        for _ in range(config.line_steps):
            compositor.tick()
        compositor.resize(100, 80)
        assert compositor.background.size == (100, 80)
        assert compositor.ink.size == (100, 80)
        assert compositor.ink.image.getbbox() is not None
        assert compositor.tick().size == (100, 80)

    def test_same_backdrop_after_round_trip(self, config):
        _, _, compositor = build(config)
        first = compositor.background.to_png()
        compositor.resize(100, 80)
        compositor.resize(WIDTH, HEIGHT)
        assert compositor.background.to_png() == first

    def test_reset_policy_discards_ink(self, config):
        session, dispatcher, compositor = build(config, dispatch_weights=LINE_ONLY, thick_stroke_chance=0.0,
                                                resize_policy='reset')
        feed(session, dispatcher, 3)
        for _ in range(config.line_steps):
            compositor.tick()
        compositor.resize(100, 80)
        assert compositor.ink.image.getbbox() is None
        assert session.element_count == 0
