"""
Pytest configuration and shared fixtures for diagram editor tests.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from models.events import PointerButton
from models.geometry import Point, PortKind
from models.scene import SceneStore
from services.editor_controller import EditorController
from services.frame_driver import FrameDriver
from services.settings_manager import EditorSettings


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


# ============== Temporary Directory Fixtures ==============

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    tmp = tempfile.mkdtemp(prefix="diagram_editor_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


# ============== Core Fixtures ==============

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> EditorSettings:
    """Default settings: 120x70 shapes, ports 15 from the left edge."""
    return EditorSettings()


@pytest.fixture
def store() -> SceneStore:
    return SceneStore()


@pytest.fixture
def controller(store: SceneStore, settings: EditorSettings, clock: FakeClock) -> EditorController:
    return EditorController(scene=store, settings=settings, clock=clock)


@pytest.fixture
def driver(controller: EditorController) -> FrameDriver:
    return FrameDriver(controller)


@pytest.fixture
def two_shapes(controller: EditorController) -> tuple[int, int]:
    """Two unlabeled shapes at (100, 100) and (300, 100), focus idle."""
    a = controller.scene.add_shape(Point(100, 100))
    b = controller.scene.add_shape(Point(300, 100))
    return a, b


# ============== Helper Functions ==============

def click(controller: EditorController, x: float, y: float):
    """Press and release the left button at one spot."""
    controller.pointer_down(PointerButton.LEFT, x, y)
    controller.pointer_up(PointerButton.LEFT, x, y)


def double_click(controller: EditorController, clock: FakeClock, x: float, y: float):
    """Two quick clicks at the same spot."""
    click(controller, x, y)
    clock.advance(0.1)
    click(controller, x, y)


def drag(controller: EditorController, start: Point, end: Point, steps: int = 4):
    """Press at ``start``, move in steps to ``end`` and release there."""
    controller.pointer_down(PointerButton.LEFT, start.x, start.y)
    for i in range(1, steps + 1):
        t = i / steps
        controller.pointer_move(start.x + (end.x - start.x) * t, start.y + (end.y - start.y) * t)
    controller.pointer_up(PointerButton.LEFT, end.x, end.y)


def port_of(controller: EditorController, shape_id: int, kind: PortKind) -> Point:
    return controller.shape_port(controller.scene.get_shape(shape_id), kind)
