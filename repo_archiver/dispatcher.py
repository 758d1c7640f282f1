"""
Input dispatcher.

Translates raw curses key codes into ``Key`` values and routes each key to
the ``ArchiverApp`` event that fits the active screen. Keys with no meaning
on a screen are dropped.
"""

import curses
from enum import Enum

from repo_archiver.app import (
    AgePicker,
    ArchiverApp,
    Archiving,
    Button,
    Confirming,
    Done,
    Selecting,
)


class Key(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    ENTER = "enter"
    ESCAPE = "escape"
    TAB = "tab"
    SPACE = "space"
    QUIT = "quit"
    YES = "yes"
    NO = "no"


_KEYMAP: dict[int, Key] = {
    curses.KEY_UP: Key.UP,
    ord("k"): Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    ord("j"): Key.DOWN,
    curses.KEY_LEFT: Key.LEFT,
    ord("h"): Key.LEFT,
    curses.KEY_RIGHT: Key.RIGHT,
    ord("l"): Key.RIGHT,
    curses.KEY_PPAGE: Key.PAGE_UP,
    curses.KEY_NPAGE: Key.PAGE_DOWN,
    curses.KEY_HOME: Key.HOME,
    ord("g"): Key.HOME,
    curses.KEY_END: Key.END,
    ord("G"): Key.END,
    curses.KEY_ENTER: Key.ENTER,
    ord("\n"): Key.ENTER,
    ord("\r"): Key.ENTER,
    27: Key.ESCAPE,
    ord("\t"): Key.TAB,
    ord(" "): Key.SPACE,
    ord("q"): Key.QUIT,
    ord("y"): Key.YES,
    ord("n"): Key.NO,
}

DEFAULT_PAGE_SIZE = 10


def translate_key(code: int) -> Key | None:
    """Map a curses ``getch`` code to a Key, or None if unbound."""
    return _KEYMAP.get(code)


def _move_keys(app: ArchiverApp, key: Key, page_size: int) -> bool:
    """Handle cursor/scroll keys shared by the list screens."""
    if key is Key.UP:
        app.move(-1)
    elif key is Key.DOWN:
        app.move(1)
    elif key is Key.PAGE_UP:
        app.move(-page_size)
    elif key is Key.PAGE_DOWN:
        app.move(page_size)
    elif key is Key.HOME:
        app.move_to(0)
    elif key is Key.END:
        app.move_to(app.row_count() - 1)
    else:
        return False
    return True


def dispatch(app: ArchiverApp, key: Key, page_size: int = DEFAULT_PAGE_SIZE) -> bool:
    """
    Route one key to the active screen.

    Args:
        app: Run context to mutate
        key: Translated key
        page_size: Rows moved by page up/down

    Returns:
        True if the key was bound on the active screen
    """
    screen = app.screen

    if isinstance(screen, AgePicker):
        if key in (Key.UP, Key.DOWN):
            return _move_keys(app, key, page_size)
        if key is Key.ENTER:
            app.confirm()
        elif key in (Key.QUIT, Key.ESCAPE):
            app.request_quit()
        else:
            return False
        return True

    if isinstance(screen, Selecting):
        if _move_keys(app, key, page_size):
            return True
        if key in (Key.SPACE, Key.TAB):
            app.toggle()
        elif key is Key.ENTER:
            app.confirm()
        elif key in (Key.QUIT, Key.ESCAPE):
            app.request_quit()
        else:
            return False
        return True

    if isinstance(screen, Confirming):
        if key is Key.LEFT:
            app.highlight(Button.CANCEL)
        elif key is Key.RIGHT:
            app.highlight(Button.CONTINUE)
        elif key is Key.TAB:
            app.switch_button()
        elif key is Key.ENTER:
            app.confirm()
        elif key is Key.YES:
            app.choose(Button.CONTINUE)
        elif key in (Key.NO, Key.ESCAPE):
            app.cancel()
        else:
            return False
        return True

    if isinstance(screen, Archiving):
        if _move_keys(app, key, page_size):
            return True
        if key is Key.QUIT:
            app.request_quit()
            return True
        return False

    if isinstance(screen, Done):
        if _move_keys(app, key, page_size):
            return True
        if key in (Key.QUIT, Key.ESCAPE, Key.ENTER):
            app.request_quit()
            return True
        return False

    return False
