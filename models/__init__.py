"""
Models package.

This package contains the data models for the diagram editor:
- Geometry primitives (Point, Rect, port placement)
- Scene storage (Shape, Connection, SceneStore)
- Connector curves (ConnectorCurve)
- Input events and interaction focus
"""

from .geometry import (
    PortKind,
    Point,
    Rect,
    shape_rect,
    rect_contains,
    within_radius,
    port_point,
    cubic_bezier_point,
)
from .scene import Shape, Connection, SceneStore
from .connector import ConnectorCurve, curve_from_anchors, curve_between
from .events import (
    PointerButton,
    Key,
    PointerDown,
    PointerUp,
    PointerMove,
    KeyDown,
    TextInput,
    Tick,
    EditorEvent,
)
from .interaction import (
    Idle,
    ShapeSelected,
    ShapeDragging,
    ShapeEditing,
    ConnectionSelected,
    ConnectorDrafting,
    Focus,
    PendingClick,
    InteractionState,
)


__all__ = [
    # Geometry
    "PortKind",
    "Point",
    "Rect",
    "shape_rect",
    "rect_contains",
    "within_radius",
    "port_point",
    "cubic_bezier_point",
    # Scene
    "Shape",
    "Connection",
    "SceneStore",
    # Connectors
    "ConnectorCurve",
    "curve_from_anchors",
    "curve_between",
    # Events
    "PointerButton",
    "Key",
    "PointerDown",
    "PointerUp",
    "PointerMove",
    "KeyDown",
    "TextInput",
    "Tick",
    "EditorEvent",
    # Interaction
    "Idle",
    "ShapeSelected",
    "ShapeDragging",
    "ShapeEditing",
    "ConnectionSelected",
    "ConnectorDrafting",
    "Focus",
    "PendingClick",
    "InteractionState",
]
