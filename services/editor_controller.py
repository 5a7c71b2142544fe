"""
Editor controller.

Turns raw pointer and keyboard events into focus changes and scene
edits. Pointer presses are resolved in a fixed priority order:

1. finishing a connector that is being drafted
2. a shape body (topmost first)
3. a port, which starts a new connector
4. an existing connector curve
5. empty canvas

A double-click on empty canvas creates a shape; a double-click on a shape
edits its label; a single press on a shape starts dragging it.
"""

import logging
import time
import unicodedata
from dataclasses import replace
from typing import Callable, Optional

from models.connector import ConnectorCurve, curve_between
from models.events import (
    EditorEvent, Key, KeyDown, PointerButton, PointerDown, PointerMove, PointerUp, TextInput, Tick,
)
from models.geometry import Point, PortKind, port_point, rect_contains, shape_rect, within_radius
from models.interaction import (
    ConnectionSelected, ConnectorDrafting, Idle, InteractionState, PendingClick,
    ShapeDragging, ShapeEditing, ShapeSelected,
)
from models.scene import Connection, SceneStore, Shape
from services.settings_manager import EditorSettings

logger = logging.getLogger(__name__)

# Port test order when starting a connector and when finishing one
START_PORT_ORDER = (PortKind.OUTGOING, PortKind.INCOMING)
TARGET_PORT_ORDER = (PortKind.INCOMING, PortKind.OUTGOING)

ENTER_KEYS = (Key.ENTER, Key.KEYPAD_ENTER)


class EditorController:
    """
    Event-driven interaction state machine for one diagram.

    The controller owns its scene and interaction state; nothing is
    global, so several editors can live side by side.

    Args:
        scene: Scene to edit (a new empty one if omitted)
        settings: Editor settings (defaults if omitted)
        clock: Returns the current time in seconds, used for
               double-click detection
    """

    def __init__(
        self,
        scene: Optional[SceneStore] = None,
        settings: Optional[EditorSettings] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.scene = scene if scene is not None else SceneStore()
        self.settings = settings or EditorSettings()
        self.state = InteractionState()
        self._clock = clock or time.monotonic

    # ------------------------------------------------------------------
    # Geometry queries
    # ------------------------------------------------------------------

    def shape_port(self, shape: Shape, kind: PortKind) -> Point:
        s = self.settings.shape
        return port_point(shape.center, kind, s.width, s.height, self.settings.connector.port_offset)

    def connection_curve(self, connection: Connection) -> Optional[ConnectorCurve]:
        """Curve for a connection, or None if an endpoint no longer exists."""
        source = self.scene.get_shape(connection.from_id)
        target = self.scene.get_shape(connection.to_id)
        if source is None or target is None:
            return None
        s = self.settings.shape
        c = self.settings.connector
        return curve_between(source.center, target.center, s.width, s.height, c.port_offset, c.curve_offset)

    def shape_at(self, point: Point) -> Optional[Shape]:
        """Topmost shape whose body contains the point."""
        s = self.settings.shape
        for shape in self.scene.shapes_topmost_first():
            if rect_contains(shape_rect(shape.center, s.width, s.height), point):
                return shape
        return None

    def port_at(
        self,
        point: Point,
        order: tuple[PortKind, ...] = START_PORT_ORDER,
        exclude_shape_id: Optional[int] = None,
    ) -> Optional[tuple[Shape, PortKind]]:
        """First port within click radius, testing each shape's ports in ``order``."""
        radius = self.settings.connector.port_click_radius
        for shape in self.scene.shapes:
            if shape.id == exclude_shape_id:
                continue
            for kind in order:
                if within_radius(self.shape_port(shape, kind), point, radius):
                    return shape, kind
        return None

    def connection_at(self, point: Point) -> Optional[Connection]:
        c = self.settings.connector
        for connection in self.scene.connections:
            curve = self.connection_curve(connection)
            if curve is not None and curve.hit_test(point, c.hit_radius, c.hit_sample_count):
                return connection
        return None

    # ------------------------------------------------------------------
    # Event entry points
    # ------------------------------------------------------------------

    def handle(self, event: EditorEvent) -> None:
        """Dispatch a single input event."""
        if isinstance(event, PointerDown):
            self.pointer_down(event.button, event.x, event.y)
        elif isinstance(event, PointerUp):
            self.pointer_up(event.button, event.x, event.y)
        elif isinstance(event, PointerMove):
            self.pointer_move(event.x, event.y)
        elif isinstance(event, KeyDown):
            self.key_down(event.key, event.is_repeat)
        elif isinstance(event, TextInput):
            self.text_input(event.text)
        elif isinstance(event, Tick):
            pass  # Frames are advanced by the frame driver
        else:
            logger.debug(f"Ignoring unknown event {event!r}")

    def pointer_down(self, button: PointerButton, x: float, y: float) -> None:
        """Handle a pointer press."""
        if button != PointerButton.LEFT:
            return

        now = self._clock()
        click = Point(x, y)
        self.state.pointer = click

        if self.state.draft is not None:
            self._finish_draft(click)
            self.state.pending_click = None
            return

        shape = self.shape_at(click)
        if shape is not None:
            self._press_shape(shape, click, now)
            return

        port = self.port_at(click)
        if port is not None:
            self._start_draft(*port)
            return

        connection = self.connection_at(click)
        if connection is not None:
            self.commit_edit()
            self.state.focus = ConnectionSelected(connection.id)
            self.state.pending_click = PendingClick(now, click)
            return

        self._press_empty(click, now)

    def pointer_move(self, x: float, y: float) -> None:
        """Track the pointer and move the dragged shape with it."""
        self.state.pointer = Point(x, y)
        focus = self.state.focus
        if isinstance(focus, ShapeDragging):
            self.scene.update_shape_center(focus.shape_id, self.state.pointer + focus.offset)

    def pointer_up(self, button: PointerButton, x: float, y: float) -> None:
        """End a drag, or attach a connector released over a target port."""
        if button != PointerButton.LEFT:
            return

        focus = self.state.focus
        if isinstance(focus, ShapeDragging):
            self.state.focus = ShapeSelected(focus.shape_id)
            shape = self.scene.get_shape(focus.shape_id)
            if shape is not None:
                logger.debug(f"Moved shape {shape.id} to ({shape.center.x:.0f}, {shape.center.y:.0f})")
        elif isinstance(focus, ConnectorDrafting):
            release = Point(x, y)
            target = self.port_at(release, TARGET_PORT_ORDER, exclude_shape_id=focus.from_id)
            if target is not None:
                self._finish_draft(release)

    def key_down(self, key: Key, is_repeat: bool = False) -> None:
        """
        Handle a key press.

        Enter, Escape and delete commands act once per physical press;
        Backspace keeps erasing while held when editing a label.
        """
        focus = self.state.focus

        if isinstance(focus, ConnectorDrafting):
            if key == Key.ESCAPE and not is_repeat:
                self.cancel_draft()
            return

        if isinstance(focus, ShapeEditing):
            if key in ENTER_KEYS:
                if not is_repeat:
                    self.commit_edit()
            elif key == Key.ESCAPE:
                if not is_repeat:
                    self.cancel_edit()
            elif key == Key.BACKSPACE:
                self.state.focus = replace(focus, draft=focus.draft[:-1])
            return

        if is_repeat or not self._is_delete_key(key):
            return

        if self.state.selected_shape_id is not None:
            self.remove_shape(self.state.selected_shape_id)
        elif self.state.selected_connection_id is not None:
            self.remove_connection(self.state.selected_connection_id)

    def text_input(self, text: str) -> None:
        """Append typed characters to the label being edited."""
        focus = self.state.focus
        if not isinstance(focus, ShapeEditing):
            return
        printable = "".join(ch for ch in text if unicodedata.category(ch) != "Cc")
        if printable:
            self.state.focus = replace(focus, draft=focus.draft + printable)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def commit_edit(self) -> Optional[int]:
        """Store the draft label, keeping the shape selected. Returns its id."""
        focus = self.state.focus
        if not isinstance(focus, ShapeEditing):
            return None
        self.scene.set_shape_text(focus.shape_id, focus.draft)
        self.state.focus = ShapeSelected(focus.shape_id)
        logger.debug(f"Committed label for shape {focus.shape_id}: {focus.draft!r}")
        return focus.shape_id

    def cancel_edit(self) -> None:
        """Drop the draft label; the stored label is left untouched."""
        focus = self.state.focus
        if isinstance(focus, ShapeEditing):
            self.state.focus = ShapeSelected(focus.shape_id)

    def cancel_draft(self) -> None:
        if isinstance(self.state.focus, ConnectorDrafting):
            self.state.focus = Idle()
            logger.debug("Connector draft cancelled")

    def remove_shape(self, shape_id: int) -> bool:
        """
        Delete a shape and its connections.

        Any focus that refers to the shape, or to one of the removed
        connections, is cleared.
        """
        shape, removed = self.scene.remove_shape(shape_id)
        if shape is None:
            return False

        removed_ids = {c.id for c in removed}
        if self.state.references_shape(shape_id) or self.state.selected_connection_id in removed_ids:
            self.state.focus = Idle()
        self.state.pending_click = None
        logger.info(f"Deleted shape {shape_id} with {len(removed)} connection(s)")
        return True

    def remove_connection(self, connection_id: int) -> bool:
        connection = self.scene.remove_connection(connection_id)
        if connection is None:
            return False
        if self.state.selected_connection_id == connection_id:
            self.state.focus = Idle()
        logger.info(f"Deleted connection {connection_id}")
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_double_click(self, click: Point, now: float) -> bool:
        pending = self.state.pending_click
        if pending is None:
            return False
        limits = self.settings.interaction
        return (
            now - pending.time <= limits.double_click_delay
            and click.distance_to(pending.position) <= limits.double_click_distance
        )

    def _is_delete_key(self, key: Key) -> bool:
        if key == Key.DELETE:
            return True
        return key == Key.BACKSPACE and self.settings.interaction.backspace_deletes_shape

    def _press_shape(self, shape: Shape, click: Point, now: float) -> None:
        focus = self.state.focus
        double_click = self._is_double_click(click, now)

        if isinstance(focus, ShapeEditing):
            if focus.shape_id == shape.id:
                # Clicks inside the label being edited keep the session going
                self.state.pending_click = None if double_click else PendingClick(now, click)
                return
            self.commit_edit()

        if double_click:
            self.state.focus = ShapeEditing(shape.id, shape.text or "")
            self.state.pending_click = None
            logger.debug(f"Editing label of shape {shape.id}")
        else:
            self.state.focus = ShapeDragging(shape.id, shape.center - click)
            self.state.pending_click = PendingClick(now, click)

    def _press_empty(self, click: Point, now: float) -> None:
        self.commit_edit()
        self.state.focus = Idle()

        if self._is_double_click(click, now):
            shape_id = self.scene.add_shape(click)
            self.state.focus = ShapeEditing(shape_id, "")
            self.state.pending_click = None
            logger.info(f"Created shape {shape_id} at ({click.x:.0f}, {click.y:.0f})")
        else:
            self.state.pending_click = PendingClick(now, click)

    def _start_draft(self, shape: Shape, kind: PortKind) -> None:
        self.commit_edit()
        self.state.focus = ConnectorDrafting(shape.id, kind, self.shape_port(shape, kind))
        self.state.pending_click = None
        logger.debug(f"Started connector from shape {shape.id} ({kind.name.lower()} port)")

    def _finish_draft(self, point: Point) -> Optional[Connection]:
        """Attach the drafted connector at ``point``; the draft ends either way."""
        draft = self.state.draft
        if draft is None:
            return None
        self.state.focus = Idle()

        target = self.port_at(point, TARGET_PORT_ORDER, exclude_shape_id=draft.from_id)
        if target is None:
            logger.debug("Connector draft dropped on empty space")
            return None

        connection = self.scene.add_connection(draft.from_id, target[0].id)
        if connection is not None:
            logger.info(f"Connected shape {connection.from_id} -> {connection.to_id}")
        return connection
