"""Markdown and JSON rendering for tool responses."""
import json
from typing import Any, Dict, List

from ..constants import CHARACTER_LIMIT, format_bytes
from ..models import Page, RemoteFile, RemoteFolder, StorageInfo
from ..orchestrator.models import BatchSummary, Failed, Skipped, Succeeded, TransferOutcome

TRUNCATION_NOTE = "\n\n*Response truncated. Use pagination to see more results.*"


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2)


def truncate(text: str, limit: int = CHARACTER_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_NOTE


def format_files_markdown(page: Page, title: str = "Files in Iagon Storage") -> str:
    lines = [f"# {title}", ""]
    lines.append(f"Showing {page.count} of {page.total} files (offset: {page.offset})")
    lines.append("")

    if not page.items:
        lines.append("*No files found*")
    else:
        for file in page.items:
            lines.append(f"## {file.name}")
            lines.append(f"- **ID**: `{file.id}`")
            lines.append(f"- **Size**: {format_bytes(file.size)}")
            if file.mime_type:
                lines.append(f"- **Type**: {file.mime_type}")
            if file.created_at:
                lines.append(f"- **Created**: {file.created_at}")
            lines.append("")

    if page.has_more:
        lines.append("---")
        lines.append(
            f"*More files available. Use offset={page.next_offset} to see next page.*"
        )

    return "\n".join(lines)


def format_file_markdown(file: RemoteFile) -> str:
    lines = [
        f"# File: {file.name}",
        "",
        f"- **ID**: `{file.id}`",
        f"- **Size**: {format_bytes(file.size)}",
    ]
    if file.mime_type:
        lines.append(f"- **Type**: {file.mime_type}")
    if file.folder_id:
        lines.append(f"- **Folder**: {file.folder_id}")
    if file.created_at:
        lines.append(f"- **Created**: {file.created_at}")
    if file.updated_at:
        lines.append(f"- **Updated**: {file.updated_at}")
    return "\n".join(lines)


def format_folders_markdown(folders: List[RemoteFolder]) -> str:
    lines = ["# Folders in Iagon Storage", ""]

    if not folders:
        lines.append("*No folders found*")
        return "\n".join(lines)

    lines.append(f"Found {len(folders)} folder(s):")
    lines.append("")
    for folder in folders:
        lines.append(f"## {folder.name}")
        lines.append(f"- **ID**: `{folder.id}`")
        if folder.parent_id:
            lines.append(f"- **Parent**: {folder.parent_id}")
        if folder.file_count is not None:
            lines.append(f"- **Files**: {folder.file_count}")
        if folder.created_at:
            lines.append(f"- **Created**: {folder.created_at}")
        lines.append("")

    return "\n".join(lines)


def storage_info_to_dict(info: StorageInfo) -> Dict[str, Any]:
    data = info.to_dict()
    data.update(
        usedFormatted=format_bytes(info.used),
        totalFormatted=format_bytes(info.total),
        availableFormatted=format_bytes(info.available),
    )
    return data


def format_storage_markdown(info: StorageInfo) -> str:
    return "\n".join([
        "# Iagon Storage Information",
        "",
        "## Usage",
        f"- **Used**: {format_bytes(info.used)} ({info.usage_percent:.1f}%)",
        f"- **Available**: {format_bytes(info.available)}",
        f"- **Total**: {format_bytes(info.total)}",
        "",
        "## Contents",
        f"- **Files**: {info.file_count}",
        f"- **Folders**: {info.folder_count}",
        "",
        "---",
        "*Note: Iagon has a 40MB per-file limit for the sharding process.*",
    ])


def outcome_to_dict(outcome: TransferOutcome) -> Dict[str, Any]:
    data = {
        "path": str(outcome.path),
        "status": outcome.status.value,
        "message": outcome.message,
    }
    if isinstance(outcome, Succeeded):
        if outcome.remote_id:
            data["fileId"] = outcome.remote_id
    elif isinstance(outcome, Failed):
        data["errorKind"] = outcome.kind.value
    elif isinstance(outcome, Skipped):
        pass
    else:
        raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")
    return data


def summary_to_dict(summary: BatchSummary) -> Dict[str, Any]:
    data = {
        "total": summary.total,
        "successful": summary.successful,
        "failed": summary.failed,
        "skipped": summary.skipped,
        "results": [outcome_to_dict(o) for o in summary.outcomes],
    }
    if summary.note:
        data["note"] = summary.note
    return data


def _outcome_icon(outcome: TransferOutcome) -> str:
    if isinstance(outcome, Succeeded):
        return "+"
    if isinstance(outcome, Failed):
        return "X"
    if isinstance(outcome, Skipped):
        return "-"
    raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")


def format_bulk_result_markdown(summary: BatchSummary) -> str:
    lines = [
        "# Bulk Upload Results",
        "",
        "## Summary",
        f"- **Total**: {summary.total}",
        f"- **Successful**: {summary.successful}",
        f"- **Failed**: {summary.failed}",
        f"- **Skipped**: {summary.skipped}",
        "",
    ]
    if summary.note:
        lines.append(f"*{summary.note}*")
        lines.append("")

    if summary.outcomes:
        lines.append("## Details")
        lines.append("")
        for outcome in summary.outcomes:
            lines.append(f"[{_outcome_icon(outcome)}] **{outcome.path.name}**: {outcome.message}")
            if isinstance(outcome, Succeeded) and outcome.remote_id:
                lines.append(f"    ID: `{outcome.remote_id}`")

    return "\n".join(lines)
