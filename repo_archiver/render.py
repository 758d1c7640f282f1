"""
Frame building.

``build_frame`` turns the current ``ArchiverApp`` state into plain styled
lines sized to the terminal. It holds no logic of its own and never mutates
the app; ``repo_archiver.terminal`` paints the result with curses.
"""

from dataclasses import dataclass, field
from datetime import datetime
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
from repo_archiver.types.outcomes import ArchiveOutcome, OutcomeState
from repo_archiver.types.repos import RepositoryRecord


class Style(Enum):
    NORMAL = "normal"
    TITLE = "title"
    HEADER = "header"
    DIM = "dim"
    SELECTED = "selected"
    ACTIVE = "active"
    SUCCESS = "success"
    FAILURE = "failure"
    WARNING = "warning"
    HELP = "help"
    BUTTON = "button"
    BUTTON_ACTIVE = "button_active"


@dataclass
class Span:
    text: str
    style: Style = Style.NORMAL


@dataclass
class Line:
    spans: list[Span] = field(default_factory=list)
    # Cursor row; drawn reversed
    highlight: bool = False

    @classmethod
    def plain(cls, text: str, style: Style = Style.NORMAL, highlight: bool = False) -> "Line":
        return cls([Span(text, style)], highlight)

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass
class Frame:
    lines: list[Line]
    # Modal box drawn centered on top of ``lines``
    overlay: list[Line] | None = None
    overlay_title: str = ""


HEADER_ROWS = 2  # title + column header
FOOTER_ROWS = 1  # help bar
MODAL_WIDTH = 50

STATUS_WIDTH = 6
NAME_WIDTH = 30
DATE_WIDTH = 12
MIN_DESCRIPTION_WIDTH = 20

STATUS_SYMBOLS = {
    OutcomeState.PENDING: "⏳",
    OutcomeState.IN_FLIGHT: "…",
    OutcomeState.SUCCEEDED: "✓",
    OutcomeState.FAILED: "✗",
}

OUTCOME_STYLES = {
    OutcomeState.PENDING: Style.WARNING,
    OutcomeState.IN_FLIGHT: Style.ACTIVE,
    OutcomeState.SUCCEEDED: Style.SUCCESS,
    OutcomeState.FAILED: Style.FAILURE,
}

HELP_TEXT = {
    AgePicker: "↑/↓: Select | Enter: Confirm | q: Quit",
    Selecting: "↑/↓ or j/k: Navigate | Space/Tab: Toggle | Enter: Confirm | q: Quit",
    Confirming: "←/→ or Tab: Switch | Enter: Select | Esc: Cancel",
    Archiving: "↑/↓ or j/k: Scroll | q: Quit (when finished)",
    Done: "All done! Press q or Enter to exit.",
}


def _fit(text: str, width: int) -> str:
    """Truncate or pad ``text`` to exactly ``width`` characters."""
    if width <= 0:
        return ""
    if len(text) > width:
        return text[: max(width - 1, 0)] + "…"
    return text.ljust(width)


def _date(moment: datetime | None) -> str:
    return moment.strftime("%Y-%m-%d") if moment is not None else "-"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _row(status: str, record: RepositoryRecord, description: str, width: int) -> str:
    desc_width = max(width - STATUS_WIDTH - NAME_WIDTH - 2 * DATE_WIDTH, MIN_DESCRIPTION_WIDTH)
    return (
        _fit(status, STATUS_WIDTH)
        + _fit(record.name, NAME_WIDTH)
        + _fit(_date(record.created_at), DATE_WIDTH)
        + _fit(_date(record.pushed_at), DATE_WIDTH)
        + _fit(description, desc_width)
    )[:width]


def _window(cursor: int, total: int, visible: int) -> range:
    """Rows to show so that ``cursor`` stays on screen."""
    if visible <= 0:
        return range(0)
    start = max(0, cursor - visible + 1)
    return range(start, min(total, start + visible))


def _title(app: ArchiverApp) -> str:
    dry = " [DRY RUN]" if app.dry_run else ""
    screen = app.screen
    if isinstance(screen, Archiving):
        return f" Archiving{dry} ({app.done_count}/{len(app.outcomes)}) "
    if isinstance(screen, Done):
        succeeded = len(app.outcomes) - app.failed_count
        return f" Done!{dry} {succeeded} archived, {app.failed_count} failed "
    age = f" older than {app.age.display()}" if app.age is not None else ""
    return f" Repo Archiver{dry}{age} ({app.selected_count} selected) "


def _header(width: int) -> Line:
    text = (
        _fit("Status", STATUS_WIDTH)
        + _fit("Name", NAME_WIDTH)
        + _fit("Created", DATE_WIDTH)
        + _fit("Last Push", DATE_WIDTH)
        + "Description"
    )
    return Line.plain(text[:width], Style.HEADER)


def _selection_rows(app: ArchiverApp, cursor: int, width: int, visible: int) -> list[Line]:
    inventory = app.inventory
    if inventory is None or len(inventory) == 0:
        age = app.age.display() if app.age is not None else "the chosen age"
        return [Line.plain(f"No repos found older than {age}.", Style.DIM)]

    lines = []
    for i in _window(cursor, len(inventory), visible):
        record = inventory[i]
        selected = inventory.is_selected(i)
        text = _row("✓" if selected else " ", record, record.description or "-", width)
        style = Style.SELECTED if selected else Style.DIM
        lines.append(Line.plain(text, style, highlight=(i == cursor)))
    return lines


def _outcome_description(outcome: ArchiveOutcome, record: RepositoryRecord) -> str:
    if outcome.state is OutcomeState.FAILED and outcome.reason:
        first = outcome.reason.strip().splitlines()
        return f"failed: {first[0] if first else outcome.reason}"
    return record.description or "-"


def _outcome_rows(app: ArchiverApp, scroll: int, width: int, visible: int) -> list[Line]:
    inventory = app.inventory
    outcomes = app.outcomes
    lines = []
    for position in range(scroll, min(len(outcomes), scroll + max(visible, 0))):
        outcome = outcomes[position]
        record = inventory[outcome.index]
        text = _row(
            STATUS_SYMBOLS[outcome.state], record, _outcome_description(outcome, record), width
        )
        lines.append(Line.plain(text, OUTCOME_STYLES[outcome.state], highlight=(position == scroll)))
    return lines


def _age_picker(screen: AgePicker, width: int, height: int) -> Frame:
    body = [Line.plain("Select minimum repo age:", Style.TITLE), Line()]
    for i, age in enumerate(screen.options):
        active = i == screen.cursor
        prefix = "▶ " if active else "  "
        body.append(Line.plain(prefix + age.display(), Style.ACTIVE if active else Style.DIM))
    body.append(Line())
    body.append(Line.plain(HELP_TEXT[AgePicker], Style.HELP))

    top = max((height - len(body)) // 2, 0)
    lines = [Line() for _ in range(top)]
    for line in body:
        pad = max((width - len(line.text)) // 2, 0)
        lines.append(Line([Span(" " * pad)] + line.spans, line.highlight))
    return Frame(lines=lines[:height])


def _modal(app: ArchiverApp, screen: Confirming) -> list[Line]:
    count = app.selected_count

    def button(label: str, which: Button) -> Span:
        style = Style.BUTTON_ACTIVE if screen.button is which else Style.BUTTON
        return Span(f" {label} ", style)

    if app.dry_run:
        warning = Line.plain("(Dry run - no changes will be made)", Style.WARNING)
    else:
        warning = Line.plain("This action cannot be undone.", Style.FAILURE)

    return [
        Line(),
        Line.plain(f"Archive {_plural(count, 'repo')}?"),
        Line(),
        warning,
        Line(),
        Line([
            Span("  "),
            button("Cancel", Button.CANCEL),
            Span("    "),
            button("Continue", Button.CONTINUE),
        ]),
    ]


def build_frame(app: ArchiverApp, width: int, height: int) -> Frame:
    """
    Build the frame for the app's current screen.

    Args:
        app: Run context (read only)
        width: Terminal columns
        height: Terminal rows

    Returns:
        Frame with at most ``height`` lines
    """
    screen = app.screen
    if isinstance(screen, AgePicker):
        return _age_picker(screen, width, height)

    visible = height - HEADER_ROWS - FOOTER_ROWS
    lines = [Line.plain(_title(app)[:width], Style.TITLE), _header(width)]

    if isinstance(screen, (Selecting, Confirming)):
        rows = _selection_rows(app, screen.cursor, width, visible)
    else:
        rows = _outcome_rows(app, screen.scroll, width, visible)
    lines.extend(rows[: max(visible, 0)])

    while len(lines) < height - FOOTER_ROWS:
        lines.append(Line())
    lines.append(Line.plain(HELP_TEXT[type(screen)][:width], Style.HELP))

    frame = Frame(lines=lines[:height])
    if isinstance(screen, Confirming):
        frame.overlay = _modal(app, screen)
        frame.overlay_title = " Confirm "
    return frame
