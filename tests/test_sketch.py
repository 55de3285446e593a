"""Tests for sketch.py: the host-facing facade."""

import pytest

from kandinsky import KandinskySketch


@pytest.fixture
def sketch(config):
    return KandinskySketch(200, 150, seed=42, config=config)


class TestSketch:
    def test_seeded_sessions_match(self, config):
        a = KandinskySketch(200, 150, seed=42, config=config)
        b = KandinskySketch(200, 150, seed=42, config=config)
        for s in (a, b):
            anchor = s.session.anchors.anchors[3]
            for i in range(6):
                s.drag(anchor.x, anchor.y, t=i * 1000)
            s.tick(5)
        assert a.state() == b.state()
        assert a.frame_png() == b.frame_png()

    def test_drag_uses_previous_pointer(self, sketch):
        anchor = sketch.session.anchors.anchors[0]
        sketch.press(anchor.x, anchor.y + 10)
        sketch.drag(anchor.x, anchor.y, t=0)
        assert sketch.session.skeletons[0].rotation == pytest.approx(-1.5707963, abs=1e-6)

    def test_touch_phases(self, sketch):
        anchor = sketch.session.anchors.anchors[0]
        assert sketch.touch('start', anchor.x - 3, anchor.y) is None
        assert sketch.touch('move', anchor.x, anchor.y, t=0) == 'skeleton'
        sketch.touch('end', 0, 0)
        assert sketch.pointer.previous is None
        with pytest.raises(ValueError):
            sketch.touch('hover', 0, 0)

    def test_tick_counts_frames(self, sketch):
        assert sketch.tick(3) == 3
        assert sketch.state()['frame_count'] == 3

    def test_reset_starts_over(self, sketch):
        anchor = sketch.session.anchors.anchors[0]
        sketch.drag(anchor.x, anchor.y, t=0)
        sketch.reset(seed=7, width=120, height=90)
        state = sketch.state()
        assert (state['seed'], state['width'], state['height']) == (7, 120, 90)
        assert state['element_count'] == 0

    def test_resize_validates(self, sketch):
        with pytest.raises(ValueError):
            sketch.resize(0, 100)
        sketch.resize(100, 100)
        assert sketch.frame_png().startswith(b'\x89PNG')

    def test_frame_base64(self, sketch):
        assert isinstance(sketch.frame_base64(), str)
