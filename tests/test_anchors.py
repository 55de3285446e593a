"""Tests for anchors.py: placement bounds, nearest-anchor query, resize."""

import random

import pytest

from kandinsky.anchors import FIXED_VANISHING_POINTS, Anchor, AnchorField, vanishing_points


def field_of(*points, width=200, height=150):
    return AnchorField([Anchor(x, y, x / width, y / height) for x, y in points], width, height)


class TestPlacement:
    @pytest.mark.parametrize('layout', ['scatter', 'grid'])
    def test_within_trigger_margin(self, layout):
        if layout == 'scatter':
            anchors = AnchorField.scatter(random.Random(3), 300, 800, 600, 25)
        else:
            anchors = AnchorField.grid(300, 800, 600, 25)
        assert len(anchors) == 300
        for a in anchors:
            assert 25 <= a.x <= 800 - 25
            assert 25 <= a.y <= 600 - 25

    def test_relative_coordinates(self):
        anchors = AnchorField.scatter(random.Random(3), 50, 800, 600, 25)
        for a in anchors:
            assert a.rx * 800 == pytest.approx(a.x)
            assert a.ry * 600 == pytest.approx(a.y)


class TestNearest:
    def test_closest_wins(self):
        anchors = field_of((10, 10), (30, 10))
        assert anchors.nearest((26, 10), 25).x == 30

    def test_tie_goes_to_first(self):
        anchors = field_of((10, 10), (30, 10))
        assert anchors.nearest((20, 10), 25).x == 10

    def test_none_in_range(self):
        assert field_of((10, 10)).nearest((100, 100), 25) is None

    def test_radius_is_strict(self):
        assert field_of((10, 10)).nearest((35, 10), 25) is None
        assert field_of((10, 10)).nearest((34.9, 10), 25) is not None


class TestResize:
    def test_round_trip_from_relative(self):
        anchors = AnchorField.scatter(random.Random(8), 100, 800, 600, 25)
        before = list(anchors)
        anchors.relayout(400, 300)
        for old, new in zip(before, anchors):
            assert new.x == pytest.approx(old.rx * 400)
            assert new.y == pytest.approx(old.ry * 300)
        assert len(anchors) == 100


class TestVanishingPoints:
    def test_fixed(self):
        assert vanishing_points(random.Random(1), 'fixed') == list(FIXED_VANISHING_POINTS)

    def test_random_in_canvas(self):
        for seed in range(30):
            points = vanishing_points(random.Random(seed), 'random')
            assert len(points) <= 2
            for rx, ry in points:
                assert 0 <= rx <= 1 and 0 <= ry <= 1
