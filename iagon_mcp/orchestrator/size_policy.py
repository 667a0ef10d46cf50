"""Pre-flight size check against Iagon's per-file limit."""
from dataclasses import dataclass
from typing import Optional

from ..constants import FILE_SIZE_LIMIT, format_bytes


@dataclass(frozen=True)
class SizeVerdict:
    accepted: bool
    reason: Optional[str] = None


class SizePolicy:
    """Accepts files up to and including the limit (exact byte comparison)."""

    def __init__(self, limit: int = FILE_SIZE_LIMIT):
        self._limit = limit

    @property
    def limit(self) -> int:
        return self._limit

    def evaluate(self, byte_size: int) -> SizeVerdict:
        if byte_size <= self._limit:
            return SizeVerdict(accepted=True)
        return SizeVerdict(
            accepted=False,
            reason=f"Exceeds {format_bytes(self._limit).replace(' ', '')} limit ({format_bytes(byte_size)})",
        )
