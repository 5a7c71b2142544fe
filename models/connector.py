"""
Connector curve geometry.

A connector runs from the outgoing port of its source shape to the
incoming port of its target shape as a cubic Bezier curve. The two
control points are pushed horizontally towards the other end, giving an
S-shaped curve that reads naturally in either direction.
"""

from dataclasses import dataclass

from .geometry import Point, PortKind, cubic_bezier_point, port_point, within_radius


@dataclass(frozen=True)
class ConnectorCurve:
    """The four points defining a connector's cubic Bezier curve."""
    p0: Point  # Anchor on the source's outgoing port
    p1: Point
    p2: Point
    p3: Point  # Anchor on the target's incoming port

    @property
    def points(self) -> tuple[Point, Point, Point, Point]:
        return (self.p0, self.p1, self.p2, self.p3)

    def point_at(self, t: float) -> Point:
        return cubic_bezier_point(self.p0, self.p1, self.p2, self.p3, t)

    def sample(self, count: int) -> list[Point]:
        """Evaluate the curve at ``count`` evenly spaced parameters, ends included."""
        if count <= 1:
            return [self.p0]
        step = 1.0 / (count - 1)
        return [self.point_at(i * step) for i in range(count)]

    def hit_test(self, point: Point, radius: float, samples: int) -> bool:
        """
        Approximate hit test against the sampled curve.

        This only checks distance to the sample points, not the true
        closest point on the curve.
        """
        return any(within_radius(p, point, radius) for p in self.sample(samples))


def curve_from_anchors(start: Point, end: Point, curve_offset: float) -> ConnectorCurve:
    """Build the S-curve between two anchor points."""
    direction = 1.0 if end.x > start.x else -1.0
    return ConnectorCurve(
        p0=start,
        p1=Point(start.x + curve_offset * direction, start.y),
        p2=Point(end.x - curve_offset * direction, end.y),
        p3=end,
    )


def curve_between(
    from_center: Point,
    to_center: Point,
    width: float,
    height: float,
    port_offset: float,
    curve_offset: float,
) -> ConnectorCurve:
    """Curve joining the outgoing port of one shape to the incoming port of another."""
    start = port_point(from_center, PortKind.OUTGOING, width, height, port_offset)
    end = port_point(to_center, PortKind.INCOMING, width, height, port_offset)
    return curve_from_anchors(start, end, curve_offset)
