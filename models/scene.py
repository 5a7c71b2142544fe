"""
Scene data models.

The scene store owns every shape and connection on the canvas. Entities
are keyed by integer ids that grow monotonically and are never reused,
so deleting one entity never invalidates references held elsewhere.
"""

from dataclasses import dataclass, field
from itertools import count
from typing import Iterator, Optional
import logging

from .geometry import Point

logger = logging.getLogger(__name__)


@dataclass
class Shape:
    """
    A rectangular node on the canvas.

    Attributes:
        id: Stable identifier assigned by the store
        center: Canvas position of the shape's center
        text: Label, or None when the shape has no label
    """
    id: int
    center: Point = field(default_factory=Point)
    text: Optional[str] = None

    @property
    def has_text(self) -> bool:
        return self.text is not None


@dataclass(frozen=True)
class Connection:
    """A directed connector from one shape to another, by shape id."""
    id: int
    from_id: int
    to_id: int

    @property
    def pair(self) -> tuple[int, int]:
        return (self.from_id, self.to_id)

    def touches(self, shape_id: int) -> bool:
        """Check if either endpoint references the shape."""
        return self.from_id == shape_id or self.to_id == shape_id


@dataclass
class SceneStore:
    """
    Root model containing all shapes and connections.

    Both collections preserve creation order, which is also the drawing
    order (later shapes are drawn on top).
    """
    shapes_by_id: dict[int, Shape] = field(default_factory=dict)
    connections_by_id: dict[int, Connection] = field(default_factory=dict)

    _shape_ids: Iterator[int] = field(default_factory=lambda: count(1), repr=False)
    _connection_ids: Iterator[int] = field(default_factory=lambda: count(1), repr=False)

    # Shapes

    def add_shape(self, center: Point) -> int:
        """Create a shape with no label at ``center`` and return its id."""
        shape = Shape(id=next(self._shape_ids), center=center)
        self.shapes_by_id[shape.id] = shape
        logger.debug(f"Added shape {shape.id} at ({center.x:.0f}, {center.y:.0f})")
        return shape.id

    def remove_shape(self, shape_id: int) -> tuple[Optional[Shape], list[Connection]]:
        """
        Remove a shape and every connection that references it.

        Returns:
            The removed shape (None if the id was unknown) and the list of
            connections removed along with it.
        """
        shape = self.shapes_by_id.pop(shape_id, None)
        if shape is None:
            return None, []

        removed = [c for c in self.connections_by_id.values() if c.touches(shape_id)]
        for connection in removed:
            del self.connections_by_id[connection.id]

        logger.debug(f"Removed shape {shape_id} and {len(removed)} connection(s)")
        return shape, removed

    def update_shape_center(self, shape_id: int, center: Point) -> None:
        shape = self.shapes_by_id.get(shape_id)
        if shape is not None:
            shape.center = center

    def set_shape_text(self, shape_id: int, text: Optional[str]) -> None:
        """Store a label; empty text is stored as None."""
        shape = self.shapes_by_id.get(shape_id)
        if shape is not None:
            shape.text = text or None

    def get_shape(self, shape_id: int) -> Optional[Shape]:
        return self.shapes_by_id.get(shape_id)

    @property
    def shapes(self) -> list[Shape]:
        """Shapes in creation order (bottom-most first)."""
        return list(self.shapes_by_id.values())

    def shapes_topmost_first(self) -> list[Shape]:
        return list(reversed(self.shapes_by_id.values()))

    @property
    def shape_count(self) -> int:
        return len(self.shapes_by_id)

    # Connections

    def add_connection(self, from_id: int, to_id: int) -> Optional[Connection]:
        """
        Create a connection between two shapes.

        Returns None without changing anything for self-loops, duplicate
        (from_id, to_id) pairs and unknown shape ids.
        """
        if from_id == to_id:
            logger.debug(f"Rejected self-loop on shape {from_id}")
            return None
        if from_id not in self.shapes_by_id or to_id not in self.shapes_by_id:
            return None
        if self.has_connection(from_id, to_id):
            logger.debug(f"Rejected duplicate connection {from_id} -> {to_id}")
            return None

        connection = Connection(id=next(self._connection_ids), from_id=from_id, to_id=to_id)
        self.connections_by_id[connection.id] = connection
        logger.debug(f"Added connection {connection.id}: {from_id} -> {to_id}")
        return connection

    def remove_connection(self, connection_id: int) -> Optional[Connection]:
        connection = self.connections_by_id.pop(connection_id, None)
        if connection is not None:
            logger.debug(f"Removed connection {connection_id}")
        return connection

    def get_connection(self, connection_id: int) -> Optional[Connection]:
        return self.connections_by_id.get(connection_id)

    def has_connection(self, from_id: int, to_id: int) -> bool:
        return any(c.pair == (from_id, to_id) for c in self.connections_by_id.values())

    def connections_for_shape(self, shape_id: int) -> list[Connection]:
        """All connections starting or ending at a shape."""
        return [c for c in self.connections_by_id.values() if c.touches(shape_id)]

    @property
    def connections(self) -> list[Connection]:
        return list(self.connections_by_id.values())

    @property
    def connection_count(self) -> int:
        return len(self.connections_by_id)

    def clear(self):
        """Remove all shapes and connections. Ids keep counting up."""
        self.shapes_by_id.clear()
        self.connections_by_id.clear()
