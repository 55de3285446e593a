"""Tests for shapes.py: easing growth, skeleton rules and every painter."""

import math
import random

import pytest

from kandinsky.colors import Color, generate_palette, hue_distance
from kandinsky.config import CompositionConfig
from kandinsky.shapes import KandinskyShape, ease_out_cubic

BASE_UNIT = 150


def spawn(seed, index, config=None, **kwargs):
    rng = random.Random(seed)
    _, palette = generate_palette(rng)
    return KandinskyShape.spawn(rng, 100, 75, index, palette, BASE_UNIT, config or CompositionConfig(), **kwargs)


def circle(speed=0.1):
    return KandinskyShape(100, 75, 5, 40, speed, Color(200, 80, 40), 0.0, 1.0, 'circle', 'filled')


class TestEasing:
    def test_curve_endpoints(self):
        assert ease_out_cubic(0) == 0
        assert ease_out_cubic(1) == 1
        assert ease_out_cubic(0.5) == pytest.approx(0.875)

    def test_grows_by_speed(self, surface):
        shape = circle(0.1)
        assert shape.size == 0
        shape.display(surface)
        assert shape.t == pytest.approx(0.1)
        assert shape.size == pytest.approx(40 * ease_out_cubic(0.1))

    def test_speed_modifier_scales_growth(self, surface):
        shape = circle(0.1)
        shape.display(surface, 0.5)
        assert shape.t == pytest.approx(0.05)
        shape.display(surface, 0.0)
        assert shape.t == pytest.approx(0.05)

    def test_clamps_at_target(self, surface):
        shape = circle(0.3)
        for _ in range(10):
            shape.display(surface)
        assert shape.t == 1.0
        assert shape.size == 40

    def test_first_display_draws(self, surface):
        circle(0.5).display(surface)
        assert surface.pixel(100, 75)[3] == 255


class TestSkeletons:
    def test_large_open_and_oriented(self):
        shape = spawn(3, 1, size=50, angle=0.25)
        assert shape.skeleton
        assert 50 * 1.8 <= shape.target_size <= 50 * 2.5
        assert shape.kind in ('rect', 'triangle')
        assert shape.style == 'open'
        assert shape.rotation == 0.25

    def test_skeleton_stays_on_anchor(self):
        for seed in range(20):
            shape = spawn(seed, 2, size=50)
            assert (shape.x, shape.y) == (100, 75)

    def test_second_skeleton_contrasts(self):
        for seed in range(100):
            first = spawn(seed, 1, size=50)
            second = spawn(seed + 1000, 2, size=50, first_color=first.color)
            assert hue_distance(first.color.h, second.color.h) >= 90 - 1e-6

    def test_exclude_mode_differs(self):
        config = CompositionConfig(second_color_mode='exclude')
        for seed in range(30):
            first = spawn(seed, 1, config, size=50)
            second = spawn(seed, 2, config, size=50, first_color=first.color)
            assert not second.color.same_as(first.color)


class TestOrnaments:
    def test_scale_shrinks_with_index(self):
        early = [spawn(s, 3, size=20).target_size for s in range(10)]
        late = [spawn(s, 100, size=20).target_size for s in range(10)]
        assert all(t == pytest.approx(24) for t in early)
        assert all(t == pytest.approx(10) for t in late)

    def test_anchor_on_circumference_or_centre(self):
        for seed in range(40):
            shape = spawn(seed, 5)
            offset = math.dist((shape.x, shape.y), (100, 75))
            assert offset == pytest.approx(0) or offset == pytest.approx(shape.target_size / 2)

    def test_ring_colours_differ_from_neighbours(self):
        seen = 0
        for seed in range(300):
            shape = spawn(seed, 4)
            if shape.ring_colors:
                seen += 1
                assert 3 <= len(shape.ring_colors) <= 5
                for a, b in zip(shape.ring_colors, shape.ring_colors[1:]):
                    assert not a.same_as(b)
        assert seen

    def test_every_painter_draws(self, surface):
        kinds = set()
        for seed in range(300):
            shape = spawn(seed, 3 + seed % 40)
            shape.t = 0.9
            shape.display(surface)
            kinds.add((shape.kind, shape.style))
        assert {k for k, _ in kinds} == {
            'circle', 'semiCircle', 'rect', 'triangle',
            'concentricCircle', 'concentricArc', 'squiggle', 'arc',
        }
        assert ('circle', 'halo') in kinds
        assert surface.image.getbbox() is not None
