"""
Interaction state models.

The editor's "focus" is a tagged union: at any instant it is exactly one
of the focus classes below. Because a shape can only be selected,
dragged or edited through one focus value, combinations such as a shape
being dragged while another is edited cannot be represented.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from .geometry import Point, PortKind


@dataclass(frozen=True)
class Idle:
    """Nothing selected."""


@dataclass(frozen=True)
class ShapeSelected:
    shape_id: int


@dataclass(frozen=True)
class ShapeDragging:
    """A selected shape following the pointer; center = pointer + offset."""
    shape_id: int
    offset: Point


@dataclass(frozen=True)
class ShapeEditing:
    """A selected shape whose label is being typed into ``draft``."""
    shape_id: int
    draft: str = ""


@dataclass(frozen=True)
class ConnectionSelected:
    connection_id: int


@dataclass(frozen=True)
class ConnectorDrafting:
    """A new connector being pulled out of a port, not yet attached."""
    from_id: int
    port_kind: PortKind
    preview_point: Point


Focus = Union[Idle, ShapeSelected, ShapeDragging, ShapeEditing, ConnectionSelected, ConnectorDrafting]

SHAPE_FOCUS_TYPES = (ShapeSelected, ShapeDragging, ShapeEditing)


@dataclass(frozen=True)
class PendingClick:
    """The previous click, kept only for double-click detection."""
    time: float
    position: Point


@dataclass
class InteractionState:
    """
    Mutable interaction state owned by one editor controller.

    Attributes:
        focus: Current focus value
        pending_click: Last unresolved click, or None
        pointer: Latest known pointer position
    """
    focus: Focus = field(default_factory=Idle)
    pending_click: Optional[PendingClick] = None
    pointer: Point = field(default_factory=Point)

    @property
    def selected_shape_id(self) -> Optional[int]:
        """Id of the selected shape (also while dragging or editing it)."""
        if isinstance(self.focus, SHAPE_FOCUS_TYPES):
            return self.focus.shape_id
        return None

    @property
    def dragged_shape_id(self) -> Optional[int]:
        if isinstance(self.focus, ShapeDragging):
            return self.focus.shape_id
        return None

    @property
    def editing_shape_id(self) -> Optional[int]:
        if isinstance(self.focus, ShapeEditing):
            return self.focus.shape_id
        return None

    @property
    def selected_connection_id(self) -> Optional[int]:
        if isinstance(self.focus, ConnectionSelected):
            return self.focus.connection_id
        return None

    @property
    def draft(self) -> Optional[ConnectorDrafting]:
        if isinstance(self.focus, ConnectorDrafting):
            return self.focus
        return None

    def references_shape(self, shape_id: int) -> bool:
        """Check if the current focus points at a shape."""
        if isinstance(self.focus, SHAPE_FOCUS_TYPES):
            return self.focus.shape_id == shape_id
        if isinstance(self.focus, ConnectorDrafting):
            return self.focus.from_id == shape_id
        return False
