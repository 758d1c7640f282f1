"""Repository inventory: the fetched candidates and their selection flags."""

from collections.abc import Iterator, Sequence
from datetime import datetime

from repo_archiver.exceptions import InvariantViolation
from repo_archiver.hosts.base import RepositoryHost, filter_candidates
from repo_archiver.logging import get_logger
from repo_archiver.types.repos import RepositoryRecord

logger = get_logger()


class Inventory:
    """
    Ordered candidate repositories plus a selection flag per record.

    Records keep the order the host returned them in. Selection is changed
    only through ``toggle``; callers are responsible for clamping indices.
    """

    def __init__(self, records: Sequence[RepositoryRecord], cutoff: datetime) -> None:
        self.cutoff = cutoff
        self._records: tuple[RepositoryRecord, ...] = tuple(records)
        self._selected: list[bool] = [False] * len(self._records)

    @classmethod
    def fetch(cls, host: RepositoryHost, cutoff: datetime) -> "Inventory":
        """
        List candidates from ``host`` and keep those created before ``cutoff``.

        Blocks until the host answers.

        Raises:
            HostError: If the listing fails
        """
        records = filter_candidates(host.list_repositories(cutoff), cutoff)
        logger.info("inventory holds %d candidates before %s", len(records), cutoff.isoformat())
        return cls(records, cutoff)

    @property
    def records(self) -> tuple[RepositoryRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> RepositoryRecord:
        return self._records[index]

    def __iter__(self) -> Iterator[RepositoryRecord]:
        return iter(self._records)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._records):
            raise InvariantViolation(
                f"selection index {index} out of range [0, {len(self._records)})"
            )

    def toggle(self, index: int) -> None:
        """Flip the selection flag of the record at ``index``."""
        self._check_index(index)
        self._selected[index] = not self._selected[index]

    def is_selected(self, index: int) -> bool:
        self._check_index(index)
        return self._selected[index]

    @property
    def selected_count(self) -> int:
        return sum(self._selected)

    def selected_indices(self) -> list[int]:
        return [i for i, flag in enumerate(self._selected) if flag]

    def selected(self) -> list[tuple[int, RepositoryRecord]]:
        """Selected ``(index, record)`` pairs in inventory order."""
        return [(i, self._records[i]) for i in self.selected_indices()]
