"""Curses drawing and the interactive event loop."""

import curses
import locale
import os

from repo_archiver.app import ArchiverApp
from repo_archiver.dispatcher import dispatch, translate_key
from repo_archiver.logging import get_logger
from repo_archiver.render import FOOTER_ROWS, HEADER_ROWS, MODAL_WIDTH, Frame, Line, Style, build_frame

logger = get_logger()

# Box drawing characters (rounded corners)
BOX_H = "─"
BOX_V = "│"
BOX_TL = "╭"
BOX_TR = "╮"
BOX_BL = "╰"
BOX_BR = "╯"

DEFAULT_POLL_INTERVAL = 0.05


class CursesScreen:
    """Paints ``Frame`` objects onto a curses window."""

    def __init__(self, stdscr: "curses.window") -> None:
        self.stdscr = stdscr
        self._attrs: dict[Style, int] = {}
        self._init_colors()
        try:
            curses.curs_set(0)
        except curses.error:
            pass  # Terminal cannot hide the cursor

    def _init_colors(self) -> None:
        """Initialize color pairs."""
        pairs = {
            Style.TITLE: (1, curses.COLOR_CYAN, -1, curses.A_BOLD),
            Style.HEADER: (2, curses.COLOR_YELLOW, -1, curses.A_BOLD),
            Style.SUCCESS: (3, curses.COLOR_GREEN, -1, 0),
            Style.FAILURE: (4, curses.COLOR_RED, -1, 0),
            Style.WARNING: (5, curses.COLOR_YELLOW, -1, 0),
            Style.ACTIVE: (6, curses.COLOR_CYAN, -1, curses.A_BOLD),
            Style.BUTTON_ACTIVE: (7, curses.COLOR_BLACK, curses.COLOR_WHITE, 0),
        }
        plain = {
            Style.NORMAL: curses.A_NORMAL,
            Style.SELECTED: curses.A_BOLD,
            Style.DIM: curses.A_DIM,
            Style.HELP: curses.A_DIM,
            Style.BUTTON: curses.A_DIM,
        }
        self._attrs.update(plain)

        if not curses.has_colors():
            self._attrs.update({style: extra for style, (_, _, _, extra) in pairs.items()})
            self._attrs[Style.BUTTON_ACTIVE] = curses.A_REVERSE
            return

        curses.start_color()
        curses.use_default_colors()
        for style, (number, fg, bg, extra) in pairs.items():
            curses.init_pair(number, fg, bg)
            self._attrs[style] = curses.color_pair(number) | extra

    def size(self) -> tuple[int, int]:
        """Return ``(width, height)``."""
        height, width = self.stdscr.getmaxyx()
        return width, height

    def page_size(self) -> int:
        _, height = self.size()
        return max(1, height - HEADER_ROWS - FOOTER_ROWS)

    def _safe_addstr(self, y: int, x: int, text: str, attr: int = 0) -> None:
        """Add a string, clipping to bounds and avoiding the bottom-right corner."""
        width, height = self.size()
        if y < 0 or y >= height or x < 0 or x >= width:
            return
        text = text[: width - x]
        if y == height - 1 and x + len(text) >= width:
            text = text[: width - x - 1]
        if not text:
            return
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            pass  # Ignore edge case errors

    def _draw_line(self, y: int, x: int, line: Line) -> None:
        extra = curses.A_REVERSE if line.highlight else 0
        for span in line.spans:
            self._safe_addstr(y, x, span.text, self._attrs.get(span.style, 0) | extra)
            x += len(span.text)

    def _draw_overlay(self, frame: Frame) -> None:
        width, height = self.size()
        box_width = min(MODAL_WIDTH, width)
        box_height = min(len(frame.overlay) + 2, height)
        left = max((width - box_width) // 2, 0)
        top = max((height - box_height) // 2, 0)
        inner = box_width - 2
        border = self._attrs[Style.TITLE]

        title = frame.overlay_title[:inner]
        self._safe_addstr(top, left, BOX_TL + title + BOX_H * (inner - len(title)) + BOX_TR, border)
        for row, line in enumerate(frame.overlay[: box_height - 2], start=1):
            self._safe_addstr(top + row, left, BOX_V + " " * inner + BOX_V, border)
            pad = max((inner - len(line.text)) // 2, 0)
            self._draw_line(top + row, left + 1 + pad, line)
        self._safe_addstr(top + box_height - 1, left, BOX_BL + BOX_H * inner + BOX_BR, border)

    def draw(self, frame: Frame) -> None:
        self.stdscr.erase()
        for y, line in enumerate(frame.lines):
            self._draw_line(y, 0, line)
        if frame.overlay:
            self._draw_overlay(frame)
        self.stdscr.refresh()

    def redraw(self, app: ArchiverApp) -> None:
        width, height = self.size()
        self.draw(build_frame(app, width, height))


def _event_loop(stdscr: "curses.window", app: ArchiverApp, poll_interval: float) -> None:
    screen = CursesScreen(stdscr)
    stdscr.keypad(True)
    stdscr.timeout(int(poll_interval * 1000))
    screen.redraw(app)

    while not app.exit_requested:
        # One redraw per applied outcome update
        for _ in app.pump():
            screen.redraw(app)

        code = stdscr.getch()
        if code == -1:
            continue
        if code == curses.KEY_RESIZE:
            screen.redraw(app)
            continue

        key = translate_key(code)
        if key is None:
            continue
        if dispatch(app, key, page_size=screen.page_size()):
            screen.redraw(app)


def run_tui(app: ArchiverApp, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
    """
    Run the interactive UI until the operator quits.

    The loop wakes every ``poll_interval`` seconds to drain outcome updates,
    so key handling never waits on an archive call.
    """
    locale.setlocale(locale.LC_ALL, "")
    os.environ.setdefault("ESCDELAY", "25")
    logger.debug("starting terminal UI on %s", type(app.screen).__name__)
    curses.wrapper(_event_loop, app, poll_interval)
