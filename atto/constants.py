"""Constants and configuration for the atto editor."""


class EditorConstants:
    """Central configuration constants for the editor."""

    # Editing
    TAB_WIDTH = 4  # Spaces inserted by the Tab key

    # Viewport
    HORIZONTAL_SCROLL_STRIDE = 7  # Columns to jump when the cursor passes the right edge
    HORIZONTAL_SCROLL_BACK_STRIDE = 1  # Columns to step back when the cursor passes the left edge
    PAGE_DOWN_MARGIN = 3  # Rows kept between the cursor and the bottom after PageDown
    STATUS_ROWS = 1  # Rows reserved at the bottom of the terminal for the status bar
    LINE_NUMBER_WIDTH = 4  # Digits in the line-number gutter
    GUTTER_WIDTH = LINE_NUMBER_WIDTH + 1  # Gutter digits plus one separating space

    # Mouse (SGR extended reporting)
    MOUSE_WHEEL_UP = 64
    MOUSE_WHEEL_DOWN = 65
    ENABLE_MOUSE = "\x1b[?1000h\x1b[?1006h"
    DISABLE_MOUSE = "\x1b[?1006l\x1b[?1000l"

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize
    INTERRUPT_PIPE_MARKER = b'C'  # Byte written to pipe to signal Ctrl-C
