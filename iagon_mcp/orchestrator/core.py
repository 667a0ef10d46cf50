"""Core orchestrator - drives batches of local files through the upload gateway."""
import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from ..constants import MAX_BULK_FILES, format_bytes
from ..errors import ErrorKind, InputError
from ..protocols import UploadFn
from .file_collector import FileCollector
from .models import (
    BatchSummary,
    Failed,
    Skipped,
    Succeeded,
    SummaryBuilder,
    TransferCandidate,
    TransferOutcome,
)
from .size_policy import SizePolicy

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class BatchUploadOrchestrator:
    """
    Uploads many local files, one outcome per file.

    Every candidate goes through existence check -> size check -> upload.
    A failed or skipped candidate never stops the batch and nothing is
    rolled back; partially successful batches are the normal case.

    The upload function is injected so the orchestrator never touches the
    network itself:

        orchestrator = BatchUploadOrchestrator()
        summary = await orchestrator.bulk_upload(paths, client.upload_file)
    """

    def __init__(
        self,
        size_policy: Optional[SizePolicy] = None,
        collector: Optional[FileCollector] = None,
        max_parallel: int = 1,
    ):
        """
        Args:
            size_policy: Pre-flight size check (default: 40MB limit)
            collector: Directory enumerator for upload_directory
            max_parallel: Concurrent uploads; 1 keeps the batch strictly sequential
        """
        if max_parallel < 1:
            raise ValueError("max_parallel must be at least 1")
        self._size_policy = size_policy or SizePolicy()
        self._collector = collector or FileCollector()
        self._max_parallel = max_parallel

    def _resolve_candidate(self, path: Path) -> Optional[TransferCandidate]:
        try:
            if not path.is_file():
                return None
            return TransferCandidate(path=path, size=path.stat().st_size)
        except OSError:
            return None

    async def upload_one(self, path: PathLike, upload_fn: UploadFn) -> TransferOutcome:
        """Run a single candidate through the checks and the upload."""
        path = Path(path)

        # 1. Existence
        candidate = self._resolve_candidate(path)
        if candidate is None:
            return Failed(path, "File not found", ErrorKind.INPUT)

        # 2. Size policy, before any network call
        verdict = self._size_policy.evaluate(candidate.size)
        if not verdict.accepted:
            logger.info(f"Skipping {path.name}: {verdict.reason}")
            return Skipped(path, verdict.reason)

        # 3. Upload; the gateway's message is relayed as-is
        try:
            result = await upload_fn(path)
        except Exception as e:
            error_msg = str(e) or type(e).__name__
            logger.error(f"Error uploading {path.name}: {error_msg}")
            return Failed(path, error_msg, ErrorKind.UNKNOWN)

        if result.success:
            return Succeeded(
                path,
                result.file_id,
                f"Uploaded ({format_bytes(candidate.size)})",
                size=candidate.size,
            )

        logger.warning(f"Upload failed for {path.name}: {result.message}")
        return Failed(path, result.message, result.error_kind or ErrorKind.UNKNOWN)

    async def run(self, paths: Sequence[PathLike], upload_fn: UploadFn) -> BatchSummary:
        """
        Upload every path and summarize.

        Outcomes are in input order regardless of max_parallel.
        """
        total = len(paths)
        builder = SummaryBuilder()
        logger.info(f"Starting batch upload: {total} files")

        if self._max_parallel == 1:
            for idx, path in enumerate(paths, 1):
                logger.info(f"[{idx}/{total}] {Path(path).name}")
                builder.record(await self.upload_one(path, upload_fn))
        else:
            semaphore = asyncio.Semaphore(self._max_parallel)

            async def _guarded(path: PathLike) -> TransferOutcome:
                async with semaphore:
                    return await self.upload_one(path, upload_fn)

            outcomes = await asyncio.gather(*(_guarded(path) for path in paths))
            for outcome in outcomes:
                builder.record(outcome)

        summary = builder.build()
        logger.info(
            f"Batch complete: {summary.successful} successful, "
            f"{summary.failed} failed, {summary.skipped} skipped"
        )
        return summary

    async def bulk_upload(self, paths: Sequence[PathLike], upload_fn: UploadFn) -> BatchSummary:
        """Upload an explicit list of 1..100 paths."""
        if not paths:
            raise InputError("At least one file path is required")
        if len(paths) > MAX_BULK_FILES:
            raise InputError(f"Cannot upload more than {MAX_BULK_FILES} files at once")
        return await self.run(list(paths), upload_fn)

    async def upload_directory(
        self,
        root: PathLike,
        upload_fn: UploadFn,
        recursive: bool = False,
        pattern: Optional[str] = None,
    ) -> BatchSummary:
        """
        Upload every file in a directory.

        Raises:
            InputError: root missing or not a directory, or empty pattern
        """
        root = Path(root).expanduser()
        if not root.exists():
            raise InputError(f"Directory not found: {root}")
        if not root.is_dir():
            raise InputError(f"Path is not a directory: {root}")

        files = self._collector.collect_files(root, recursive=recursive, pattern=pattern)
        if not files:
            note = f"No files found in {root}"
            if pattern:
                note += f' matching pattern "{pattern}"'
            logger.info(note)
            return BatchSummary.empty(note)

        return await self.run(files, upload_fn)
