"""Orchestrator data models."""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..errors import ErrorKind


class OutcomeStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class TransferCandidate:
    """A local file considered for upload in one batch run."""
    path: Path
    size: int


@dataclass(frozen=True)
class Succeeded:
    """Candidate uploaded; remote_id is the Iagon file id."""
    path: Path
    remote_id: Optional[str]
    message: str
    size: int = 0

    status = OutcomeStatus.SUCCESS


@dataclass(frozen=True)
class Failed:
    """Candidate could not be uploaded; message is relayed verbatim."""
    path: Path
    message: str
    kind: ErrorKind = ErrorKind.UNKNOWN

    status = OutcomeStatus.FAILED


@dataclass(frozen=True)
class Skipped:
    """Candidate rejected locally by policy; never sent."""
    path: Path
    message: str

    status = OutcomeStatus.SKIPPED


TransferOutcome = Union[Succeeded, Failed, Skipped]


@dataclass(frozen=True)
class BatchSummary:
    """
    Result of a batch upload.

    Counters are derived from the outcomes, so
    total == successful + failed + skipped == len(outcomes) always holds.
    """
    outcomes: Tuple[TransferOutcome, ...] = ()
    note: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def successful(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Succeeded))

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Failed))

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Skipped))

    @property
    def all_success(self) -> bool:
        return self.failed == 0 and self.skipped == 0

    @classmethod
    def empty(cls, note: Optional[str] = None) -> "BatchSummary":
        return cls(outcomes=(), note=note)


@dataclass
class SummaryBuilder:
    """Mutable accumulator owned by one orchestrator run."""
    _outcomes: List[TransferOutcome] = field(default_factory=list)

    def record(self, outcome: TransferOutcome) -> None:
        self._outcomes.append(outcome)

    def build(self, note: Optional[str] = None) -> BatchSummary:
        return BatchSummary(outcomes=tuple(self._outcomes), note=note)
