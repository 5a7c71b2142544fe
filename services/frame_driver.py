"""
Frame driver.

Runs once per rendered frame, after the frame's events have been
handled. It moves the live end of a connector being drafted to the
latest pointer position and hands the renderer an immutable snapshot of
everything it needs to draw.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional

from models.connector import ConnectorCurve
from models.events import EditorEvent, Tick
from models.geometry import Point, PortKind, within_radius
from models.interaction import ConnectorDrafting
from services.editor_controller import EditorController

logger = logging.getLogger(__name__)

CURSOR_MARKER = "|"


class PortRole(Enum):
    """How a port should be decorated."""
    DEFAULT = auto()
    SELECTED_CONNECTOR = auto()  # Endpoint of the selected connection
    DRAFT_START = auto()         # Port the current connector draft came from


@dataclass(frozen=True)
class ShapeView:
    id: int
    center: Point
    width: float
    height: float
    corner_radius: float
    display_text: str
    is_selected: bool = False
    is_editing: bool = False
    is_dragging: bool = False

    @property
    def show_outline(self) -> bool:
        """Selected shapes get an outline, except while their label is edited."""
        return self.is_selected and not self.is_editing


@dataclass(frozen=True)
class ConnectionView:
    id: int
    from_id: int
    to_id: int
    curve: ConnectorCurve
    is_selected: bool = False


@dataclass(frozen=True)
class PortView:
    shape_id: int
    kind: PortKind
    position: Point
    radius: float
    role: PortRole = PortRole.DEFAULT


@dataclass(frozen=True)
class ConnectorPreview:
    """Straight preview from the draft's port to the pointer."""
    start: Point
    end: Point


@dataclass(frozen=True)
class FrameSnapshot:
    """Read-only view of the editor for one frame."""
    shapes: tuple[ShapeView, ...]
    connections: tuple[ConnectionView, ...]
    ports: tuple[PortView, ...]
    preview: Optional[ConnectorPreview]
    pointer: Point
    status_text: str

    @property
    def selected_shape(self) -> Optional[ShapeView]:
        return next((s for s in self.shapes if s.is_selected), None)

    @property
    def selected_connection(self) -> Optional[ConnectionView]:
        return next((c for c in self.connections if c.is_selected), None)


class FrameDriver:
    """
    Per-frame hook around an EditorController.

    Input events go through ``dispatch``; a Tick advances the frame and
    the other events are forwarded to the controller unchanged.
    """

    def __init__(self, controller: EditorController):
        self.controller = controller
        self._last_snapshot: Optional[FrameSnapshot] = None

    @property
    def last_snapshot(self) -> Optional[FrameSnapshot]:
        """Snapshot produced by the most recent tick."""
        return self._last_snapshot

    def dispatch(self, event: EditorEvent) -> Optional[FrameSnapshot]:
        """Route an event; returns the new snapshot when the event is a Tick."""
        if isinstance(event, Tick):
            return self.tick()
        self.controller.handle(event)
        return None

    def tick(self) -> FrameSnapshot:
        """Advance the connector preview and build this frame's snapshot."""
        state = self.controller.state
        if isinstance(state.focus, ConnectorDrafting):
            state.focus = replace(state.focus, preview_point=state.pointer)
        self._last_snapshot = self.snapshot()
        return self._last_snapshot

    def snapshot(self) -> FrameSnapshot:
        """Build a snapshot of the current state without advancing anything."""
        return FrameSnapshot(
            shapes=tuple(self._shape_views()),
            connections=tuple(self._connection_views()),
            ports=tuple(self._port_views()),
            preview=self._preview(),
            pointer=self.controller.state.pointer,
            status_text=self._status_text(),
        )

    def _shape_views(self) -> list[ShapeView]:
        state = self.controller.state
        s = self.controller.settings.shape
        focus = state.focus
        views = []
        for shape in self.controller.scene.shapes:
            is_editing = state.editing_shape_id == shape.id
            if is_editing:
                text = focus.draft + CURSOR_MARKER
            else:
                text = shape.text or ""
            views.append(ShapeView(
                id=shape.id,
                center=shape.center,
                width=s.width,
                height=s.height,
                corner_radius=s.corner_radius,
                display_text=text,
                is_selected=state.selected_shape_id == shape.id,
                is_editing=is_editing,
                is_dragging=state.dragged_shape_id == shape.id,
            ))
        return views

    def _connection_views(self) -> list[ConnectionView]:
        selected_id = self.controller.state.selected_connection_id
        views = []
        for connection in self.controller.scene.connections:
            curve = self.controller.connection_curve(connection)
            if curve is None:
                continue
            views.append(ConnectionView(
                id=connection.id,
                from_id=connection.from_id,
                to_id=connection.to_id,
                curve=curve,
                is_selected=connection.id == selected_id,
            ))
        return views

    def _port_views(self) -> list[PortView]:
        controller = self.controller
        state = controller.state
        c = controller.settings.connector

        highlighted: dict[tuple[int, PortKind], PortRole] = {}
        selected = state.selected_connection_id
        if selected is not None:
            connection = controller.scene.get_connection(selected)
            if connection is not None:
                highlighted[(connection.from_id, PortKind.OUTGOING)] = PortRole.SELECTED_CONNECTOR
                highlighted[(connection.to_id, PortKind.INCOMING)] = PortRole.SELECTED_CONNECTOR
        draft = state.draft
        if draft is not None:
            highlighted[(draft.from_id, draft.port_kind)] = PortRole.DRAFT_START

        views = []
        for shape in controller.scene.shapes:
            for kind in (PortKind.OUTGOING, PortKind.INCOMING):
                position = controller.shape_port(shape, kind)
                hovered = within_radius(position, state.pointer, c.port_click_radius)
                views.append(PortView(
                    shape_id=shape.id,
                    kind=kind,
                    position=position,
                    radius=c.port_hover_radius if hovered else c.port_radius,
                    role=highlighted.get((shape.id, kind), PortRole.DEFAULT),
                ))
        return views

    def _preview(self) -> Optional[ConnectorPreview]:
        draft = self.controller.state.draft
        if draft is None:
            return None
        shape = self.controller.scene.get_shape(draft.from_id)
        if shape is None:
            return None
        return ConnectorPreview(
            start=self.controller.shape_port(shape, draft.port_kind),
            end=draft.preview_point,
        )

    def _status_text(self) -> str:
        state = self.controller.state
        editing = state.editing_shape_id is not None
        selected = state.selected_shape_id is not None and not editing
        return "Mouse: {:.0f}, {:.0f} | Shapes: {} {}{}".format(
            state.pointer.x,
            state.pointer.y,
            self.controller.scene.shape_count,
            "[EDITING]" if editing else "",
            "[SELECTED]" if selected else "",
        )
