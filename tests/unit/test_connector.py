"""
Unit tests for connector curve geometry.
"""

import pytest
from models.connector import ConnectorCurve, curve_between, curve_from_anchors
from models.geometry import Point


class TestCurveConstruction:
    """Tests for control point placement."""

    def test_left_to_right(self):
        curve = curve_from_anchors(Point(0, 0), Point(100, 50), 40)
        assert curve.p1 == Point(40, 0)
        assert curve.p2 == Point(60, 50)

    def test_right_to_left(self):
        curve = curve_from_anchors(Point(100, 0), Point(0, 50), 40)
        assert curve.p1 == Point(60, 0)
        assert curve.p2 == Point(40, 50)

    def test_vertical_uses_negative_direction(self):
        """Equal x is not 'to the right', so the offset sign is negative."""
        curve = curve_from_anchors(Point(10, 0), Point(10, 100), 40)
        assert curve.p1 == Point(-30, 0)
        assert curve.p2 == Point(50, 100)

    def test_curve_between_uses_ports(self):
        curve = curve_between(Point(100, 100), Point(300, 100), 120, 70, 15, 40)
        assert curve.p0 == Point(55, 135)   # outgoing port of the source
        assert curve.p3 == Point(255, 65)   # incoming port of the target
        assert curve.p1 == Point(95, 135)
        assert curve.p2 == Point(215, 65)
        assert curve.points == (curve.p0, curve.p1, curve.p2, curve.p3)


class TestSampling:
    """Tests for sampling and hit testing."""

    @pytest.fixture
    def curve(self) -> ConnectorCurve:
        return curve_from_anchors(Point(0, 0), Point(200, 100), 40)

    def test_sample_includes_ends(self, curve: ConnectorCurve):
        points = curve.sample(11)
        assert len(points) == 11
        assert points[0] == curve.p0
        assert points[-1] == curve.p3

    def test_sample_single_point(self, curve: ConnectorCurve):
        assert curve.sample(1) == [curve.p0]

    def test_hit_on_sample(self, curve: ConnectorCurve):
        middle = curve.point_at(0.5)
        assert curve.hit_test(Point(middle.x + 3, middle.y), 8, 11)

    def test_miss_far_away(self, curve: ConnectorCurve):
        assert not curve.hit_test(Point(0, 90), 8, 11)

    def test_hit_only_near_samples(self):
        """Hit testing is an approximation; gaps between samples can miss."""
        # Control points at thirds make x(t) = 1000 * t
        curve = ConnectorCurve(Point(0, 0), Point(1000 / 3, 0), Point(2000 / 3, 0), Point(1000, 0))
        between = Point(50, 0)  # samples sit at x = 0, 100, 200, ...
        assert not curve.hit_test(between, 8, 11)
        assert curve.hit_test(Point(100, 2), 8, 11)
