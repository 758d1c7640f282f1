"""
Screen state machine.

``ArchiverApp`` is the single owned context for a run: the active screen,
the inventory, and the executor holding the outcomes. The dispatcher calls
its event methods, the renderer reads it, and nothing else mutates it.

Screens move AgePicker -> Selecting -> Confirming -> Archiving -> Done, with
Confirming able to fall back to Selecting.
"""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum

from repo_archiver.age import DEFAULT_PRESET_INDEX, PRESETS, Age
from repo_archiver.exceptions import InvariantViolation
from repo_archiver.executor import ArchiveExecutor
from repo_archiver.hosts.base import RepositoryHost
from repo_archiver.inventory import Inventory
from repo_archiver.logging import get_logger
from repo_archiver.types.outcomes import ArchiveOutcome, OutcomeState, OutcomeUpdate

logger = get_logger()


class Button(Enum):
    CANCEL = "cancel"
    CONTINUE = "continue"

    def other(self) -> "Button":
        return Button.CONTINUE if self is Button.CANCEL else Button.CANCEL


@dataclass(frozen=True)
class AgePicker:
    options: tuple[Age, ...]
    cursor: int


@dataclass(frozen=True)
class Selecting:
    cursor: int = 0


@dataclass(frozen=True)
class Confirming:
    # Selecting cursor to restore on cancel
    cursor: int = 0
    button: Button = Button.CONTINUE


@dataclass(frozen=True)
class Archiving:
    scroll: int = 0


@dataclass(frozen=True)
class Done:
    scroll: int = 0


Screen = AgePicker | Selecting | Confirming | Archiving | Done


def _clamp(value: int, size: int) -> int:
    """Clamp ``value`` to ``[0, size)``; 0 for an empty range."""
    if size <= 0:
        return 0
    return max(0, min(size - 1, value))


class ArchiverApp:
    """
    Owned state for one interactive run.

    Args:
        host: Repository host used for the one-time listing
        executor: Executor that will archive the confirmed selection
        age: Age given on the command line; skips the picker when set
        presets: Ages offered by the picker
        default_preset: Picker row highlighted initially
        clock: Returns the current aware UTC time (tests pin it)

    Raises:
        HostError: If ``age`` is given and the listing fails
    """

    def __init__(
        self,
        host: RepositoryHost,
        executor: ArchiveExecutor,
        age: Age | None = None,
        presets: Sequence[Age] = PRESETS,
        default_preset: int = DEFAULT_PRESET_INDEX,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.host = host
        self.executor = executor
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.age: Age | None = None
        self.cutoff: datetime | None = None
        self.exit_requested = False
        self._inventory: Inventory | None = None

        self.screen: Screen
        if age is not None:
            self._resolve(age)
        else:
            options = tuple(presets)
            self.screen = AgePicker(options=options, cursor=_clamp(default_preset, len(options)))

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def dry_run(self) -> bool:
        return self.executor.dry_run

    @property
    def inventory(self) -> Inventory | None:
        return self._inventory

    @property
    def outcomes(self) -> tuple[ArchiveOutcome, ...]:
        return self.executor.outcomes

    @property
    def selected_count(self) -> int:
        return self._inventory.selected_count if self._inventory is not None else 0

    @property
    def done_count(self) -> int:
        return sum(1 for o in self.outcomes if o.is_terminal)

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.state is OutcomeState.FAILED)

    def row_count(self) -> int:
        """Number of rows the active screen's cursor or scroll moves over."""
        screen = self.screen
        if isinstance(screen, AgePicker):
            return len(screen.options)
        if isinstance(screen, (Selecting, Confirming)):
            return len(self._inventory) if self._inventory is not None else 0
        return len(self.outcomes)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def move(self, delta: int) -> None:
        """Move the cursor (or scroll window) by ``delta`` rows."""
        screen = self.screen
        if isinstance(screen, AgePicker):
            self.move_to(screen.cursor + delta)
        elif isinstance(screen, Selecting):
            self.move_to(screen.cursor + delta)
        elif isinstance(screen, (Archiving, Done)):
            self.move_to(screen.scroll + delta)

    def move_to(self, position: int) -> None:
        """Put the cursor (or scroll window) at ``position``, clamped."""
        screen = self.screen
        position = _clamp(position, self.row_count())
        if isinstance(screen, (AgePicker, Selecting)):
            self.screen = replace(screen, cursor=position)
        elif isinstance(screen, (Archiving, Done)):
            self.screen = replace(screen, scroll=position)

    def toggle(self) -> None:
        """Flip the selection of the row under the cursor (Selecting only)."""
        screen = self.screen
        if not isinstance(screen, Selecting) or not self._inventory:
            return
        self._inventory.toggle(screen.cursor)

    def confirm(self) -> None:
        """Enter: pick the age, open the confirmation, or press the highlighted button."""
        screen = self.screen
        if isinstance(screen, AgePicker):
            self._resolve(screen.options[screen.cursor])
        elif isinstance(screen, Selecting):
            if self.selected_count > 0:
                self.screen = Confirming(cursor=screen.cursor)
        elif isinstance(screen, Confirming):
            self.choose(screen.button)
        elif isinstance(screen, Done):
            self.request_quit()

    def switch_button(self) -> None:
        screen = self.screen
        if isinstance(screen, Confirming):
            self.screen = replace(screen, button=screen.button.other())

    def highlight(self, button: Button) -> None:
        screen = self.screen
        if isinstance(screen, Confirming):
            self.screen = replace(screen, button=button)

    def choose(self, button: Button) -> None:
        """Press a confirmation button directly."""
        screen = self.screen
        if not isinstance(screen, Confirming):
            return
        if button is Button.CANCEL:
            self.screen = Selecting(cursor=screen.cursor)
        else:
            self._start_archiving()

    def cancel(self) -> None:
        """Escape out of the confirmation; same as choosing Cancel."""
        self.choose(Button.CANCEL)

    def request_quit(self) -> bool:
        """
        Ask to leave the program.

        Ignored while any archive outcome is still pending or in flight.

        Returns:
            True if the quit was accepted
        """
        if isinstance(self.screen, Archiving) and not self.executor.finished:
            logger.debug("quit deferred: %d of %d outcomes terminal",
                         self.done_count, len(self.outcomes))
            return False
        self.exit_requested = True
        return True

    def pump(self, timeout: float | None = None) -> Iterator[OutcomeUpdate]:
        """
        Apply pending executor updates, yielding after each one.

        The caller redraws once per yielded update. Archiving turns into
        Done as soon as the last outcome becomes terminal.
        """
        if not self.executor.started:
            return
        for update in self.executor.updates(timeout):
            screen = self.screen
            if isinstance(screen, Archiving) and self.executor.finished:
                self.screen = Done(scroll=screen.scroll)
            yield update

    # ------------------------------------------------------------------
    # Transitions with side effects
    # ------------------------------------------------------------------

    def _resolve(self, age: Age) -> None:
        if self._inventory is not None:
            raise InvariantViolation("inventory already fetched for this run")
        self.age = age
        self.cutoff = age.cutoff(self.clock())
        self._inventory = Inventory.fetch(self.host, self.cutoff)
        self.screen = Selecting(cursor=0)

    def _start_archiving(self) -> None:
        jobs = self._inventory.selected() if self._inventory is not None else []
        if not jobs:
            raise InvariantViolation("archiving requested with nothing selected")
        self.screen = Archiving(scroll=0)
        self.executor.start(jobs)
