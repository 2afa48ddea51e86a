"""
pytest-qt tests for the interactive layout canvas.

Pointer handlers are driven through their plain-argument API so positions
are exact; a few tests go through real Qt mouse events as a smoke check.
"""
import pytest
from PyQt5.QtCore import Qt, QPoint

from models.scene import SceneRef
from models.viewport import ViewportState
from constants import MIN_ZOOM, MAX_ZOOM, ZOOM_STEP

from conftest import make_entries


def place(canvas, *rects):
    """Put rectangles on the canvas with an identity viewport."""
    canvas.scenes = make_entries(*rects)
    canvas.viewport = ViewportState()


# ══════════════════════════════════════════════════════════════════════════
# Layout operations
# ══════════════════════════════════════════════════════════════════════════

class TestLayoutOperations:

    def test_set_scenes_row_layout(self, canvas):
        refs = [SceneRef('a', 'A', 2000, 1500), SceneRef('b', 'B', 1000, 1000), SceneRef('c', 'C', 500, 800)]
        canvas.set_scenes(refs)

        layout = canvas.get_layout()
        assert [(l.scene_id, l.x, l.y) for l in layout] == [('a', 20, 20), ('b', 2040, 20), ('c', 3060, 20)]
        assert [(l.width, l.height) for l in layout] == [(2000, 1500), (1000, 1000), (500, 800)]

    def test_set_scenes_fits_view(self, canvas):
        canvas.set_scenes([SceneRef('a', 'A', 2000, 1500), SceneRef('b', 'B', 1000, 1000)])
        # 3020 wide content must be zoomed out to fit 1000 px
        assert canvas.viewport.zoom < 1.0
        sx, _ = canvas.viewport.world_to_screen(20 + 3020 / 2, 0)
        assert sx == pytest.approx(500)

    def test_set_scenes_resets_interaction(self, canvas):
        place(canvas, (0, 0, 100, 100))
        canvas.selected_index = 0
        canvas.set_scenes([SceneRef('a', 'A', 10, 10), SceneRef('b', 'B', 10, 10)])
        assert canvas.selected_index == -1
        assert canvas.drag is None

    def test_fit_all_scenario(self, canvas):
        place(canvas, (0, 0, 200, 100), (250, 0, 200, 100), (0, 150, 200, 100))
        with canvas_signal(canvas):
            canvas.fit_all()

        zoom = min((1000 - 80) / 450, (800 - 80) / 250)
        assert canvas.viewport.zoom == pytest.approx(zoom)
        assert canvas.viewport.pan_x == pytest.approx(500 - 225 * zoom)
        assert canvas.viewport.pan_y == pytest.approx(400 - 125 * zoom)

    def test_resize_keeps_viewport(self, canvas):
        place(canvas, (0, 0, 200, 100), (250, 0, 200, 100))
        canvas.fit_all()
        before = (canvas.viewport.zoom, canvas.viewport.pan_x, canvas.viewport.pan_y)
        canvas.resize(640, 480)
        assert (canvas.viewport.zoom, canvas.viewport.pan_x, canvas.viewport.pan_y) == before

    def test_zoom_buttons_anchor_at_centre(self, canvas):
        place(canvas, (0, 0, 200, 100), (250, 0, 200, 100))
        centre_world = canvas.viewport.screen_to_world(500, 400)
        canvas.zoom_in()
        assert canvas.viewport.zoom == pytest.approx(1.0 + ZOOM_STEP)
        assert canvas.viewport.screen_to_world(500, 400) == pytest.approx(centre_world)
        canvas.zoom_out()
        canvas.zoom_out()
        assert canvas.viewport.zoom == pytest.approx(1.0 - ZOOM_STEP)

    def test_zoom_limits(self, canvas):
        place(canvas, (0, 0, 200, 100))
        for _ in range(60):
            canvas.zoom_in()
        assert canvas.viewport.zoom == MAX_ZOOM
        for _ in range(60):
            canvas.zoom_out()
        assert canvas.viewport.zoom == MIN_ZOOM

    def test_set_snap(self, canvas):
        canvas.set_snap('x')
        assert (canvas.snap_x, canvas.snap_y) == (False, True)
        canvas.set_snap('both')
        assert (canvas.snap_x, canvas.snap_y) == (True, True)
        canvas.set_snap('both')
        assert (canvas.snap_x, canvas.snap_y) == (False, False)
        canvas.set_snap('y')
        assert (canvas.snap_x, canvas.snap_y) == (False, True)
        canvas.set_snap('none')
        assert (canvas.snap_x, canvas.snap_y) == (False, False)

    def test_layer_up_and_down(self, canvas):
        place(canvas, (0, 0, 10, 10), (20, 0, 10, 10), (40, 0, 10, 10))
        canvas.selected_index = 0
        canvas.layer_up()
        assert [e.scene_id for e in canvas.scenes] == ['scene1', 'scene0', 'scene2']
        assert canvas.selected_index == 1

        canvas.layer_up()
        canvas.layer_up()  # already on top
        assert [e.scene_id for e in canvas.scenes] == ['scene1', 'scene2', 'scene0']
        assert canvas.selected_index == 2

        canvas.layer_down()
        assert [e.scene_id for e in canvas.scenes] == ['scene1', 'scene0', 'scene2']

    def test_layer_without_selection(self, canvas):
        place(canvas, (0, 0, 10, 10), (20, 0, 10, 10))
        canvas.layer_up()
        canvas.layer_down()
        assert [e.scene_id for e in canvas.scenes] == ['scene0', 'scene1']

    def test_generate_preview(self, canvas):
        place(canvas, (0, 0, 400, 200), (400, 0, 400, 200))
        image = canvas.generate_preview(400)
        assert (image.width(), image.height()) == (400, 100)


# ══════════════════════════════════════════════════════════════════════════
# Pointer interaction
# ══════════════════════════════════════════════════════════════════════════

class TestPointerInteraction:

    @pytest.fixture
    def pair(self, canvas):
        # A at (0, 0), B at (300, 0); identity viewport so screen == world
        place(canvas, (0, 0, 200, 100), (300, 0, 200, 100))
        return canvas

    def test_drag_snaps_to_neighbour(self, qtbot, pair):
        pair.pointer_down(350, 50)
        assert pair.is_dragging
        assert pair.selected_index == 1

        pair.pointer_move(260, 50)
        assert (pair.scenes[1].x, pair.scenes[1].y) == (200, 0)
        assert any(g.axis == 'x' and g.value == 200 for g in pair.snap_guides)

        with qtbot.waitSignal(pair.layout_changed, timeout=1000):
            pair.pointer_up()
        assert pair.drag is None
        assert pair.snap_guides == []

    def test_shift_drag_does_not_snap(self, pair):
        pair.pointer_down(350, 50)
        pair.pointer_move(260, 57, modifiers={'shift'})
        assert (pair.scenes[1].x, pair.scenes[1].y) == (210, 7)
        assert pair.snap_guides == []

    def test_drag_respects_zoom(self, pair):
        pair.set_snap('none')
        pair.viewport = ViewportState(zoom=2.0, pan_x=100, pan_y=100)
        # B's world (300, 0) is screen (700, 100)
        pair.pointer_down(710, 110)
        pair.pointer_move(810, 150)
        assert (pair.scenes[1].x, pair.scenes[1].y) == (350, 20)

    def test_drag_topmost(self, pair):
        pair.scenes[1].x = 100  # overlaps A, B is on top
        pair.pointer_down(150, 50)
        assert pair.drag.index == 1

    def test_click_on_empty_space(self, pair):
        pair.pointer_down(250, 500)
        assert pair.drag is None

    def test_middle_button_pans(self, pair):
        pair.pointer_down(500, 500, button='middle')
        assert pair.is_panning
        pair.pointer_move(520, 510)
        pair.pointer_move(530, 530)
        assert (pair.viewport.pan_x, pair.viewport.pan_y) == (30, 30)
        # Panning never moves scenes
        assert (pair.scenes[1].x, pair.scenes[1].y) == (300, 0)

    def test_ctrl_left_pans_even_over_scene(self, pair):
        pair.pointer_down(350, 50, modifiers={'ctrl'})
        assert pair.is_panning
        pair.pointer_move(340, 40)
        assert (pair.viewport.pan_x, pair.viewport.pan_y) == (-10, -10)

    def test_pan_end_does_not_emit(self, qtbot, pair):
        pair.pointer_down(500, 500, button='middle')
        with qtbot.assertNotEmitted(pair.layout_changed):
            pair.pointer_up()

    def test_hover(self, pair):
        pair.pointer_move(50, 50)
        assert pair.hovered_index == 0
        pair.pointer_move(250, 50)
        assert pair.hovered_index == -1

    def test_leave_ends_drag(self, qtbot, pair):
        pair.pointer_down(350, 50)
        pair.pointer_move(360, 50)
        with qtbot.waitSignal(pair.layout_changed, timeout=1000):
            pair.pointer_leave()
        assert pair.drag is None
        assert pair.hovered_index == -1

    def test_wheel_zooms_at_cursor(self, qtbot, pair):
        before = pair.viewport.screen_to_world(120, 80)
        with qtbot.waitSignal(pair.layout_changed, timeout=1000):
            pair.wheel(120, 120, 80)
        assert pair.viewport.zoom == pytest.approx(1.0 + ZOOM_STEP)
        assert pair.viewport.screen_to_world(120, 80) == pytest.approx(before)

        pair.wheel(-120, 120, 80)
        pair.wheel(-120, 120, 80)
        assert pair.viewport.zoom == pytest.approx(1.0 - ZOOM_STEP)

    def test_wheel_during_drag(self, pair):
        pair.pointer_down(350, 50)
        pair.wheel(120, 350, 50)
        assert pair.is_dragging
        assert pair.viewport.zoom == pytest.approx(1.0 + ZOOM_STEP)

    def test_second_press_during_drag_is_ignored(self, qtbot, pair):
        pair.pointer_down(350, 50)
        pair.pointer_move(400, 80)
        pair.pointer_down(400, 80, button='middle')
        pair.pointer_down(400, 80, modifiers={'ctrl'})
        assert pair.is_dragging
        assert not pair.is_panning

        with qtbot.waitSignal(pair.layout_changed, timeout=1000):
            pair.pointer_up()
        assert pair.drag is None

    def test_qt_mouse_events(self, qtbot, pair):
        qtbot.mousePress(pair, Qt.LeftButton, pos=QPoint(350, 50))
        assert pair.is_dragging
        qtbot.mouseRelease(pair, Qt.LeftButton, pos=QPoint(350, 50))
        assert pair.drag is None

    def test_keyboard_zoom_and_fit(self, qtbot, pair):
        pair.fit_all()
        fitted = pair.viewport.zoom

        qtbot.keyClick(pair, Qt.Key_Plus, Qt.ControlModifier)
        assert pair.viewport.zoom == pytest.approx(fitted + ZOOM_STEP)
        qtbot.keyClick(pair, Qt.Key_Minus, Qt.ControlModifier)
        qtbot.keyClick(pair, Qt.Key_Minus, Qt.ControlModifier)
        assert pair.viewport.zoom == pytest.approx(fitted - ZOOM_STEP)

        with qtbot.waitSignal(pair.layout_changed, timeout=1000):
            qtbot.keyClick(pair, Qt.Key_F)
        assert pair.viewport.zoom == pytest.approx(fitted)


# ══════════════════════════════════════════════════════════════════════════
# Empty canvas and lifecycle
# ══════════════════════════════════════════════════════════════════════════

class TestEmptyAndLifecycle:

    def test_empty_canvas_noops(self, qtbot, canvas):
        with qtbot.assertNotEmitted(canvas.layout_changed):
            canvas.fit_all()
            canvas.zoom_in()
            canvas.zoom_out()
            canvas.wheel(120, 10, 10)
            canvas.pointer_down(10, 10)
            canvas.pointer_move(20, 20)
            canvas.pointer_up()
            canvas.pointer_leave()
            canvas.layer_up()
            canvas.layer_down()
        assert canvas.get_layout() == []
        assert canvas.generate_preview() is None
        assert (canvas.viewport.zoom, canvas.viewport.pan_x, canvas.viewport.pan_y) == (1.0, 0.0, 0.0)

    def test_set_scenes_empty(self, canvas):
        canvas.set_scenes([])
        assert canvas.get_layout() == []

    def test_paint_does_not_raise(self, qtbot, canvas):
        place(canvas, (0, 0, 200, 100), (300, 0, 200, 100))
        canvas.selected_index = 0
        canvas.pointer_down(350, 50)
        canvas.pointer_move(260, 50)
        canvas.show()
        qtbot.waitExposed(canvas)
        canvas.repaint()

    def test_teardown(self, qtbot, canvas):
        place(canvas, (0, 0, 200, 100), (300, 0, 200, 100))
        canvas.teardown()
        assert not canvas.is_alive
        assert not canvas.media.is_alive

        # Late callbacks and input are ignored
        with qtbot.assertNotEmitted(canvas.layout_changed):
            canvas._on_media_loaded('late.png')
            canvas.media._load('late.png')
            canvas.pointer_down(50, 50)
            canvas.wheel(120, 0, 0)
        canvas.teardown()


class canvas_signal:
    """Context manager asserting layout_changed fires exactly once."""

    def __init__(self, canvas):
        self.canvas = canvas
        self.count = 0

    def _on_changed(self):
        self.count += 1

    def __enter__(self):
        self.canvas.layout_changed.connect(self._on_changed)
        return self

    def __exit__(self, *exc):
        self.canvas.layout_changed.disconnect(self._on_changed)
        assert self.count == 1
        return False
