"""Test editing session operations, files and the render contract."""

import os
import tempfile

import pytest
from atto.buffer import CursorPosition, TextBuffer
from atto.constants import EditorConstants
from atto.keyboard import char, ctrl, special
from atto.mode import Mode
from atto.session import EditorSession


def make_session(lines, row=0, col=0, **kwargs):
    session = EditorSession(**kwargs)
    session._replace_buffer(TextBuffer(lines))
    session.cursor.row = row
    session.cursor.col = col
    session.view.ensure_cursor_visible()
    return session


def test_viewport_dimensions_exclude_status_bar_and_gutter():
    session = EditorSession(height=24, width=80)
    assert session.viewport.height == 24 - EditorConstants.STATUS_ROWS
    assert session.viewport.width == 80 - EditorConstants.GUTTER_WIDTH


def test_backspace_joins_with_previous_line():
    session = make_session(["ab", "cd"], row=1, col=0)
    assert session.backspace()
    assert session.buffer.lines == ["abcd"]
    assert session.cursor == CursorPosition(0, 2)


def test_backspace_deletes_previous_char():
    session = make_session(["abc"], col=2)
    assert session.backspace()
    assert session.buffer.lines == ["ac"]
    assert session.cursor.col == 1


def test_backspace_at_start_of_buffer_does_nothing():
    session = make_session(["abc"])
    assert not session.backspace()
    assert session.buffer.lines == ["abc"]


def test_new_line_moves_cursor_to_start_of_tail():
    session = make_session(["abcd"], col=2)
    assert session.new_line()
    assert session.buffer.lines == ["ab", "cd"]
    assert session.cursor == CursorPosition(1, 0)


def test_insert_tab_inserts_spaces():
    session = make_session(["ab"], col=1)
    assert session.insert_tab()
    assert session.buffer.lines == ["a" + " " * EditorConstants.TAB_WIDTH + "b"]
    assert session.cursor.col == 1 + EditorConstants.TAB_WIDTH


def test_delete_forward():
    session = make_session(["ab", "cd"], col=1)
    assert session.delete_forward()
    assert session.buffer.lines == ["a", "cd"]
    # At end of line the next line is joined on
    assert session.delete_forward()
    assert session.buffer.lines == ["acd"]
    assert session.cursor == CursorPosition(0, 1)


def test_delete_forward_at_end_of_buffer():
    session = make_session(["ab"], col=2)
    assert not session.delete_forward()
    assert session.buffer.lines == ["ab"]


def test_load_file():
    with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False, encoding='utf-8') as f:
        f.write("Line 1\nLine 2\nLine 3\n")
        temp_filename = f.name
    try:
        session = EditorSession(filename=temp_filename)
        session.load_file()
        assert session.buffer.lines == ["Line 1", "Line 2", "Line 3"]
        assert session.cursor == CursorPosition(0, 0)
        assert session.view.buffer is session.buffer
        assert not session.modified
    finally:
        os.remove(temp_filename)


def test_load_missing_file_gives_empty_buffer():
    session = EditorSession(filename="/nonexistent/file.txt")
    session.load_file()
    assert session.buffer.lines == [""]


def test_save_file_writes_one_terminator_per_line():
    with tempfile.TemporaryDirectory() as tmp:
        target = os.path.join(tmp, "out.txt")
        session = make_session(["First line", "", "Third line"], filename=target)
        session.modified = True
        assert session.save_file()
        with open(target, 'r', encoding='utf-8') as f:
            assert f.read() == "First line\n\nThird line\n"
        assert not session.modified
        assert session.last_error is None
        # No temp files left behind
        assert os.listdir(tmp) == ["out.txt"]


def test_save_file_keeps_permissions():
    with tempfile.TemporaryDirectory() as tmp:
        target = os.path.join(tmp, "script.sh")
        with open(target, 'w') as f:
            f.write("old\n")
        os.chmod(target, 0o754)
        session = make_session(["new"], filename=target)
        assert session.save_file()
        assert os.stat(target).st_mode & 0o777 == 0o754


def test_save_file_failure_reports_error():
    session = make_session(["text"], filename="/nonexistent/dir/file.txt")
    assert not session.save_file()
    assert session.last_error.startswith("Error:")
    assert session.status_message == session.last_error


def test_save_without_filename_fails():
    session = make_session(["text"])
    assert not session.save_file()
    assert session.last_error == "No file name"


def test_reload_file_discards_changes():
    with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False, encoding='utf-8') as f:
        f.write("on disk\n")
        temp_filename = f.name
    try:
        session = EditorSession(filename=temp_filename)
        session.load_file()
        session.handle_event(char('x'))
        assert session.buffer.lines == ["xon disk"]
        session.handle_event(ctrl('r'))
        assert session.buffer.lines == ["on disk"]
        assert session.status_message == f"Reloaded {temp_filename}"
    finally:
        os.remove(temp_filename)


def test_reload_unreadable_file_reports_error():
    with tempfile.TemporaryDirectory() as tmp:
        session = make_session(["keep me"], filename=tmp)  # A directory cannot be read
        assert not session.reload_file()
        assert session.buffer.lines == ["keep me"]
        assert session.status_message.startswith("Error:")


def test_status_message_cleared_by_next_key():
    session = make_session(["abc"])
    session.status_message = "Saved"
    session.handle_event(special('right'))
    assert session.status_message is None


def test_status_line():
    session = make_session(["abc", "def"], row=1, col=2, filename="notes.txt")
    assert session.status_line() == " notes.txt | Ln 2, Col 3"
    session.modified = True
    session.status_message = "Hello"
    assert session.status_line() == " notes.txt [+] | Ln 2, Col 3 | Hello"


def test_status_line_in_command_mode():
    session = make_session(["abc"], vim_mode=True)
    session.enter_command_line()
    session.command_input = "wq"
    assert session.status_line() == " [No Name] | Ln 1, Col 1 :wq"


def test_frame_prefixes_line_numbers():
    session = make_session(["alpha", "beta"], row=1, col=3, height=5, width=40)
    frame = session.frame()
    assert frame.lines == ["   1 alpha", "   2 beta"]
    assert frame.cursor_y == 1
    assert frame.cursor_x == 3 + EditorConstants.GUTTER_WIDTH
    assert not frame.help_visible


def test_frame_follows_scroll():
    lines = [f"line {i}" for i in range(100)]
    session = make_session(lines, row=50, height=11, width=40)
    frame = session.frame()
    assert len(frame.lines) == 10
    assert frame.lines[-1] == "  51 line 50"
    assert frame.cursor_y == 9


def test_frame_cursor_on_status_bar_in_command_mode():
    session = make_session(["abc"], vim_mode=True, height=10)
    session.enter_command_line()
    session.command_input = "w"
    frame = session.frame()
    assert frame.cursor_y == session.viewport.height
    assert frame.cursor_x == len(frame.status)


def test_help_lines_list_bindings():
    session = EditorSession(preset="nano")
    lines = session.help_lines()
    assert any(line.startswith("Ctrl-O") and "Save" in line for line in lines)
    assert not any(line.startswith(":") for line in lines)
    assert any(line.startswith(":") for line in EditorSession(vim_mode=True).help_lines())


def test_quit_requests_save_on_exit():
    session = EditorSession()
    session.quit(save=True)
    assert not session.running
    assert session.save_on_exit


def test_mode_starts_normal():
    assert EditorSession().mode == Mode.NORMAL
