"""
Geometry primitives for the diagram canvas.

Everything here is pure: points and rectangles are immutable values and
the helper functions have no side effects, so hit-testing is reproducible.
"""

from dataclasses import dataclass
from enum import Enum, auto
import math


class PortKind(Enum):
    """The two connection points every shape exposes."""
    OUTGOING = auto()  # Bottom edge, where connectors start
    INCOMING = auto()  # Top edge, where connectors end


@dataclass(frozen=True)
class Point:
    """2D point in logical canvas units."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Point":
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its top-left corner and size."""
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2.0, self.y + self.height / 2.0)


def shape_rect(center: Point, width: float, height: float) -> Rect:
    """Bounding rectangle of a shape centered on ``center``."""
    return Rect(center.x - width / 2.0, center.y - height / 2.0, width, height)


def rect_contains(rect: Rect, point: Point) -> bool:
    """Half-open containment: left/top edges are inside, right/bottom are not."""
    return rect.left <= point.x < rect.right and rect.top <= point.y < rect.bottom


def within_radius(a: Point, b: Point, radius: float) -> bool:
    """Check whether two points are at most ``radius`` apart."""
    return a.distance_to(b) <= radius


def port_point(
    center: Point,
    kind: PortKind,
    width: float,
    height: float,
    port_offset: float,
) -> Point:
    """
    Position of a shape's port.

    Both ports sit ``port_offset`` to the right of the shape's left edge;
    the outgoing port is on the bottom edge, the incoming port on the top.
    """
    x = center.x - width / 2.0 + port_offset
    if kind == PortKind.OUTGOING:
        return Point(x, center.y + height / 2.0)
    return Point(x, center.y - height / 2.0)


def cubic_bezier_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """
    Evaluate a cubic Bezier curve at parameter ``t`` in [0, 1].

    The endpoints are returned as-is so that t=0 and t=1 are exact
    regardless of floating point rounding in the Bernstein terms.
    """
    if t <= 0.0:
        return p0
    if t >= 1.0:
        return p3

    u = 1.0 - t
    b0 = u * u * u
    b1 = 3.0 * u * u * t
    b2 = 3.0 * u * t * t
    b3 = t * t * t
    return Point(
        b0 * p0.x + b1 * p1.x + b2 * p2.x + b3 * p3.x,
        b0 * p0.y + b1 * p1.y + b2 * p2.y + b3 * p3.y,
    )
