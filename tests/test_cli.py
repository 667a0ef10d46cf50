"""Tests for iagon-mcp CLI helpers and commands."""
import logging
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from iagon_mcp import cli, cli_render
from iagon_mcp.config import TOKEN_ENV
from iagon_mcp.errors import ErrorKind
from iagon_mcp.models import Page, RawPage, RemoteFile, StorageInfo, UploadResult
from iagon_mcp.orchestrator import BatchSummary, Failed, Succeeded


@pytest.fixture
def env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(TOKEN_ENV, "tok")
    for key in ("IAGON_TRANSPORT", "PORT", "HOST", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    return tmp_path


@pytest.fixture
def gateway(monkeypatch):
    client = AsyncMock()
    client.__aenter__.return_value = client
    client.__aexit__.return_value = False

    async def upload(path, remote_name=None, folder_id=None):
        return UploadResult.ok(remote_name or Path(path).name, "remote-1", 1)

    client.upload_file.side_effect = upload
    monkeypatch.setattr(cli, "IagonClient", SimpleNamespace(from_settings=lambda settings: client))
    return client


def test_setup_logging_defaults_to_warning():
    level = cli._setup_logging(debug=False, log_level=None)
    assert level == "WARNING"
    assert not logging.getLogger().isEnabledFor(logging.INFO)


def test_setup_logging_debug_mode():
    level = cli._setup_logging(debug=True, log_level="ERROR")
    assert level == "DEBUG"
    assert logging.getLogger().isEnabledFor(logging.DEBUG)
    assert not logging.getLogger("httpx").isEnabledFor(logging.INFO)


def test_setup_logging_explicit_level():
    assert cli._setup_logging(debug=False, log_level="info") == "INFO"


def test_parser_defaults_to_serve_options():
    args = cli._build_parser().parse_args(["serve", "--transport", "http", "--port", "9000"])
    assert args.transport == "http"
    assert args.port == 9000
    assert args.host is None


def test_parser_rejects_zero_parallel():
    with pytest.raises(SystemExit):
        cli._build_parser().parse_args(["upload", "a.bin", "--parallel", "0"])


def test_missing_token_exits_with_error(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(TOKEN_ENV, raising=False)

    assert cli.run_cli(["quota"]) == 1
    assert "ERROR:" in capsys.readouterr().err


def test_env_file_supplies_token(env, gateway, monkeypatch):
    monkeypatch.delenv(TOKEN_ENV)
    (env / "custom.env").write_text(f"{TOKEN_ENV}=from-file\n", encoding="utf-8")
    gateway.get_storage_info.return_value = StorageInfo(used=1, total=2, available=1)

    assert cli.run_cli(["--env-file", str(env / "custom.env"), "quota"]) == 0


def test_upload_single_file(env, gateway, capsys):
    path = env / "clip.mp4"
    path.write_bytes(b"data")

    code = cli.run_cli(["--json", "upload", str(path), "--folder-id", "dir-1", "--name", "final.mp4"])

    assert code == 0
    gateway.upload_file.assert_awaited_once_with(path, remote_name="final.mp4", folder_id="dir-1")
    assert '"successful": 1' in capsys.readouterr().out


def test_bulk_upload_with_failure_exits_nonzero(env, gateway):
    good = env / "good.bin"
    good.write_bytes(b"x")

    code = cli.run_cli(["upload", str(good), str(env / "missing.bin")])

    assert code == 1
    gateway.upload_file.assert_awaited_once()


def test_name_with_multiple_paths_is_error(env, gateway, capsys):
    assert cli.run_cli(["upload", "a.bin", "b.bin", "--name", "x"]) == 1
    assert "--name" in capsys.readouterr().err


def test_upload_dir_missing_directory(env, gateway, capsys):
    assert cli.run_cli(["upload-dir", str(env / "nope")]) == 1
    assert "Directory not found" in capsys.readouterr().err


def test_ls_passes_paging(env, gateway, capsys):
    gateway.list_files.return_value = RawPage(items=(RemoteFile(id="1", name="a.mp4"),), total=3)

    assert cli.run_cli(["--json", "ls", "--limit", "1", "--offset", "1"]) == 0

    gateway.list_files.assert_awaited_once_with(folder_id=None, limit=1, offset=1)
    assert '"nextOffset": 2' in capsys.readouterr().out


def test_ls_invalid_limit(env, gateway):
    assert cli.run_cli(["ls", "--limit", "500"]) == 1
    gateway.list_files.assert_not_awaited()


def test_search_renders_table(env, gateway, capsys):
    gateway.search_files.return_value = RawPage(items=(RemoteFile(id="1", name="a.mp4"),), total=1)

    assert cli.run_cli(["search", "a"]) == 0
    assert "a.mp4" in capsys.readouterr().out


def test_upload_keeps_bracketed_file_name(env, gateway, capsys):
    path = env / "take[b]final.mp4"
    path.write_bytes(b"data")

    assert cli.run_cli(["upload", str(path)]) == 0
    assert "take[b]final.mp4" in capsys.readouterr().out


def test_batch_summary_renders_remote_text_literally(capsys):
    summary = BatchSummary(
        outcomes=(
            Succeeded(Path("/x/[red]a.mp4"), "id-[i]", "ok"),
            Failed(Path("/x/b.mp4"), "quota [/draft] hit", ErrorKind.SERVER),
        )
    )

    cli_render.render_batch_summary(summary)

    out = capsys.readouterr().out
    assert "[red]a.mp4" in out
    assert "id-[i]" in out
    assert "quota [/draft] hit" in out


def test_empty_batch_note_renders_literally(capsys):
    cli_render.render_batch_summary(BatchSummary(outcomes=(), note="No files in [/raw]"))
    assert "No files in [/raw]" in capsys.readouterr().out


def test_files_page_renders_names_and_query_literally(capsys):
    page = Page(items=(RemoteFile(id="1", name="[/x]cut.mp4"),), total=1, offset=0)

    cli_render.render_files_page(page, title="Search: [b]")

    out = capsys.readouterr().out
    assert "[/x]cut.mp4" in out
    assert "Search: [b]" in out
