"""
Archive executor.

Runs the archive operation once per selected repository on worker threads and
reports progress as ``OutcomeUpdate`` messages on a single queue. Only the
thread that drains the queue (the UI event loop) ever mutates outcomes.
"""

import dataclasses
import queue
import time
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor

from repo_archiver.exceptions import InvariantViolation
from repo_archiver.hosts.base import RepositoryHost
from repo_archiver.logging import get_logger
from repo_archiver.types.outcomes import ArchiveOutcome, OutcomeState, OutcomeUpdate
from repo_archiver.types.repos import ArchiveResult, RepositoryRecord

logger = get_logger("executor")

Job = tuple[int, RepositoryRecord]


class ArchiveExecutor:
    """
    Archive selected repositories and stream their outcomes.

    With ``concurrency=1`` calls run one at a time in selection order; higher
    values run that many calls in parallel. In dry-run mode no host call is
    made and every outcome goes straight to succeeded through the same queue.

    Example:
        ```python
        executor = ArchiveExecutor(host, concurrency=4)
        for position, outcome in executor.run(inventory.selected()):
            print(position, outcome.state)
        ```
    """

    def __init__(
        self,
        host: RepositoryHost,
        dry_run: bool = False,
        concurrency: int = 1,
        delay: float = 0.0,
    ) -> None:
        """
        Initialize the executor.

        Args:
            host: Host whose ``archive_repository`` is called
            dry_run: Simulate every archive without calling the host
            concurrency: Number of archive calls allowed in flight at once
            delay: Seconds a worker pauses after each call
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.host = host
        self.dry_run = dry_run
        self.concurrency = concurrency
        self.delay = delay

        self._queue: "queue.Queue[OutcomeUpdate]" = queue.Queue()
        self._outcomes: list[ArchiveOutcome] = []
        self._issued: set[int] = set()
        self._pool: ThreadPoolExecutor | None = None
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def outcomes(self) -> tuple[ArchiveOutcome, ...]:
        """Outcomes in selection order (read-only view)."""
        return tuple(self._outcomes)

    @property
    def finished(self) -> bool:
        """True once started and every outcome is terminal."""
        return self._started and all(o.is_terminal for o in self._outcomes)

    def start(self, jobs: Sequence[Job]) -> None:
        """
        Create a pending outcome per job and launch the archive calls.

        Args:
            jobs: ``(inventory_index, record)`` pairs in selection order

        Raises:
            InvariantViolation: If the executor was already started
        """
        if self._started:
            raise InvariantViolation("archive executor already started")
        self._started = True
        self._outcomes = [ArchiveOutcome(index=index, name=record.name) for index, record in jobs]

        if self.dry_run:
            logger.info("dry run: simulating %d archives", len(jobs))
            for position in range(len(jobs)):
                self._post(position, OutcomeState.IN_FLIGHT)
                self._post(position, OutcomeState.SUCCEEDED)
            return

        logger.info("archiving %d repositories (concurrency=%d)", len(jobs), self.concurrency)
        self._pool = ThreadPoolExecutor(
            max_workers=self.concurrency, thread_name_prefix="archive"
        )
        for position, (_, record) in enumerate(jobs):
            self._claim(position)
            self._pool.submit(self._archive_one, position, record)
        self._pool.shutdown(wait=False)

    def updates(self, timeout: float | None = None) -> Iterator[OutcomeUpdate]:
        """
        Apply and yield queued updates, one at a time.

        Args:
            timeout: Seconds to wait for the first update; None or 0 returns
                immediately when the queue is empty
        """
        block = bool(timeout)
        while True:
            try:
                update = self._queue.get(block=block, timeout=timeout if block else None)
            except queue.Empty:
                return
            block = False
            self._apply(update)
            yield update

    def run(self, jobs: Sequence[Job]) -> Iterator[tuple[int, ArchiveOutcome]]:
        """Start ``jobs`` and yield ``(position, outcome)`` snapshots until all are terminal."""
        self.start(jobs)
        while not self.finished:
            for update in self.updates(timeout=0.1):
                yield update.position, dataclasses.replace(self._outcomes[update.position])

    def close(self) -> None:
        """Wait for any running archive calls to return."""
        if self._pool is not None:
            self._pool.shutdown(wait=True)

    def _claim(self, position: int) -> None:
        if position in self._issued:
            raise InvariantViolation(f"archive already issued for position {position}")
        self._issued.add(position)

    def _post(self, position: int, state: OutcomeState, reason: str | None = None) -> None:
        self._queue.put(OutcomeUpdate(position=position, state=state, reason=reason))

    def _apply(self, update: OutcomeUpdate) -> None:
        outcome = self._outcomes[update.position]
        if not outcome.can_advance(update.state):
            raise InvariantViolation(
                f"outcome for {outcome.name} cannot move from "
                f"{outcome.state.value} to {update.state.value}"
            )
        outcome.state = update.state
        outcome.reason = update.reason

    def _archive_one(self, position: int, record: RepositoryRecord) -> None:
        """Worker body: one host call, reported only through the queue."""
        self._post(position, OutcomeState.IN_FLIGHT)
        try:
            result = self.host.archive_repository(record)
        except Exception as e:
            # Recorded as a failed outcome
            logger.exception("archive of %s raised", record.full_name)
            result = ArchiveResult(status="error", message=str(e))

        if result.ok:
            logger.info("archived %s", record.full_name)
            self._post(position, OutcomeState.SUCCEEDED)
        else:
            reason = result.message or "archive failed"
            logger.warning("archive of %s failed: %s", record.full_name, reason.strip())
            self._post(position, OutcomeState.FAILED, reason)

        if self.delay:
            time.sleep(self.delay)
