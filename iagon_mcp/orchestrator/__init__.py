"""Orchestrator package - batch uploads and pagination."""
from .core import BatchUploadOrchestrator
from .file_collector import FileCollector
from .models import (
    BatchSummary,
    Failed,
    OutcomeStatus,
    Skipped,
    Succeeded,
    TransferCandidate,
    TransferOutcome,
)
from .pagination import paginate
from .size_policy import SizePolicy, SizeVerdict

__all__ = [
    "BatchUploadOrchestrator",
    "FileCollector",
    "BatchSummary",
    "Failed",
    "OutcomeStatus",
    "Skipped",
    "Succeeded",
    "TransferCandidate",
    "TransferOutcome",
    "paginate",
    "SizePolicy",
    "SizeVerdict",
]
