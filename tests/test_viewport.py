"""Test cursor and scroll handling."""

import pytest
from atto.buffer import CursorPosition, TextBuffer
from atto.constants import EditorConstants
from atto.viewport import Viewport, ViewportController


def make_controller(lines, row=0, col=0, height=10, width=20, scroll=0, h_scroll=0):
    buffer = TextBuffer(lines)
    cursor = CursorPosition(row, col)
    viewport = Viewport(scroll=scroll, h_scroll=h_scroll, height=height, width=width)
    return ViewportController(buffer, cursor, viewport)


def assert_cursor_visible(controller):
    vp = controller.viewport
    cursor = controller.cursor
    assert vp.scroll <= cursor.row < vp.scroll + vp.height
    assert vp.h_scroll <= cursor.col < vp.h_scroll + vp.width
    assert 0 <= cursor.col <= controller.buffer.line_length(cursor.row)


def test_move_down_scrolls_minimally():
    c = make_controller([f"line {i}" for i in range(50)], height=10)
    for _ in range(9):
        c.move_cursor_vertically(1)
    assert c.cursor.row == 9
    assert c.viewport.scroll == 0
    c.move_cursor_vertically(1)
    assert c.cursor.row == 10
    assert c.viewport.scroll == 1
    assert_cursor_visible(c)


def test_move_up_scrolls_minimally():
    c = make_controller([f"line {i}" for i in range(50)], row=20, scroll=20, height=10)
    c.move_cursor_vertically(-1)
    assert c.cursor.row == 19
    assert c.viewport.scroll == 19


def test_vertical_move_clamps_to_buffer():
    c = make_controller(["a", "b", "c"])
    c.move_cursor_vertically(-5)
    assert c.cursor.row == 0
    c.move_cursor_vertically(100)
    assert c.cursor.row == 2


def test_vertical_move_truncates_column():
    c = make_controller(["a long line", "ab"], col=8)
    c.move_cursor_vertically(1)
    assert c.cursor == CursorPosition(1, 2)


def test_vertical_move_to_shorter_line_scrolls_back_left():
    long_line = "x" * 100
    c = make_controller([long_line, "short"], col=100, width=20)
    c.move_cursor_horizontally(0)
    assert c.viewport.h_scroll > 0
    c.move_cursor_vertically(1)
    assert c.cursor.col == 5
    assert_cursor_visible(c)


def test_horizontal_move_clamps_to_line():
    c = make_controller(["abc"])
    c.move_cursor_horizontally(-1)
    assert c.cursor.col == 0
    c.move_cursor_horizontally(10)
    assert c.cursor.col == 3


def test_right_edge_jumps_by_stride():
    stride = EditorConstants.HORIZONTAL_SCROLL_STRIDE
    c = make_controller(["x" * 100], col=19, width=20)
    c.move_cursor_horizontally(1)
    assert c.cursor.col == 20
    assert c.viewport.h_scroll == stride
    assert_cursor_visible(c)
    # Inside the window nothing moves
    c.move_cursor_horizontally(1)
    assert c.viewport.h_scroll == stride


def test_left_edge_steps_back():
    c = make_controller(["x" * 100], col=10, h_scroll=10, width=20)
    c.move_cursor_horizontally(-1)
    assert c.cursor.col == 9
    assert c.viewport.h_scroll == 10 - EditorConstants.HORIZONTAL_SCROLL_BACK_STRIDE
    assert_cursor_visible(c)


def test_stride_never_skips_past_cursor():
    c = make_controller(["x" * 100], col=2, width=3)
    c.move_cursor_horizontally(1)
    assert c.viewport.h_scroll == 3
    assert_cursor_visible(c)


@pytest.mark.parametrize("deltas", [
    [1, 1, 1, -1, 5, -20, 40],
    [60, -3, 2, 1, 1, 1],
])
def test_invariants_hold_after_any_move(deltas):
    lines = [("y" * (i * 7 % 53)) for i in range(40)]
    c = make_controller(lines, height=7, width=11)
    for delta in deltas:
        c.move_cursor_vertically(delta)
        assert_cursor_visible(c)
        c.move_cursor_horizontally(delta)
        assert_cursor_visible(c)


def test_page_down_moves_cursor_near_bottom():
    c = make_controller([str(i) for i in range(50)], height=10)
    c.page_down()
    assert c.viewport.scroll == 10
    assert c.cursor.row == 10 + 10 - EditorConstants.PAGE_DOWN_MARGIN
    assert_cursor_visible(c)


def test_page_down_clamps_at_end():
    c = make_controller([str(i) for i in range(25)], height=10, scroll=10, row=10)
    c.page_down()
    assert c.viewport.scroll == 15
    c.page_down()
    assert c.viewport.scroll == 15
    assert c.cursor.row == 25 - EditorConstants.PAGE_DOWN_MARGIN
    assert_cursor_visible(c)


def test_page_down_on_short_buffer():
    c = make_controller(["a", "b"], height=10)
    c.page_down()
    assert c.viewport.scroll == 0
    assert c.cursor.row in (0, 1)
    assert_cursor_visible(c)


def test_page_up_moves_cursor_to_top():
    c = make_controller([str(i) for i in range(50)], height=10, scroll=25, row=30)
    c.page_up()
    assert c.viewport.scroll == 15
    assert c.cursor.row == 15
    c.page_up()
    c.page_up()
    assert c.viewport.scroll == 0
    assert c.cursor.row == 0


def test_page_up_at_top_goes_to_first_row():
    c = make_controller([str(i) for i in range(50)], height=10, row=5)
    c.page_up()
    assert c.cursor.row == 0
    assert c.viewport.scroll == 0


def test_scroll_by_saturates():
    c = make_controller([str(i) for i in range(50)], height=10)
    for _ in range(45):
        c.scroll_by(1)
    assert c.viewport.scroll == 40
    c.scroll_by(1)
    assert c.viewport.scroll == 40


def test_scroll_by_moves_cursor_along():
    c = make_controller([str(i) for i in range(50)], height=10, row=3)
    c.scroll_by(1)
    assert c.viewport.scroll == 1
    assert c.cursor.row == 4
    c.scroll_by(-1)
    assert c.viewport.scroll == 0
    assert c.cursor.row == 3


def test_scroll_by_up_at_top_is_noop():
    c = make_controller([str(i) for i in range(50)], height=10, row=3)
    c.scroll_by(-1)
    assert c.viewport.scroll == 0
    assert c.cursor.row == 3


def test_scroll_by_short_buffer_does_not_scroll():
    c = make_controller(["a", "b", "c"], height=10)
    c.scroll_by(1)
    assert c.viewport.scroll == 0
    assert c.cursor.row == 0


def test_scroll_by_leaves_cursor_that_cannot_follow():
    c = make_controller([str(i) for i in range(50)], height=10, row=30, scroll=0)
    c.scroll_by(1)
    assert c.viewport.scroll == 1
    assert c.cursor.row == 30


def test_resize_keeps_cursor_visible():
    c = make_controller([str(i) for i in range(50)], height=20, row=15)
    c.resize(5, 20)
    assert c.viewport.height == 5
    assert_cursor_visible(c)


def test_visible_rows_and_cursor_position():
    c = make_controller(["first", "se\tcond", "third"], height=2, width=3, row=1, col=4)
    c.ensure_cursor_visible()
    rows = c.visible_rows()
    assert [number for number, _ in rows] == [1, 2]
    assert rows[1][1] == "ond"
    assert c.cursor_screen_position() == (1, 0)
