"""Tests for the pre-flight size policy."""
from iagon_mcp.constants import FILE_SIZE_LIMIT
from iagon_mcp.orchestrator import SizePolicy


def test_limit_is_40_mib():
    assert FILE_SIZE_LIMIT == 41_943_040
    assert SizePolicy().limit == FILE_SIZE_LIMIT


def test_exact_limit_is_accepted():
    verdict = SizePolicy().evaluate(41_943_040)
    assert verdict.accepted is True
    assert verdict.reason is None


def test_one_byte_over_is_rejected():
    verdict = SizePolicy().evaluate(41_943_041)
    assert verdict.accepted is False
    assert "limit" in verdict.reason
    assert "40MB" in verdict.reason


def test_reason_includes_actual_size():
    verdict = SizePolicy().evaluate(50 * 1024 * 1024)
    assert verdict.reason == "Exceeds 40MB limit (50 MB)"


def test_empty_file_is_accepted():
    assert SizePolicy().evaluate(0).accepted


def test_custom_limit():
    policy = SizePolicy(limit=1024)
    assert policy.evaluate(1024).accepted
    assert not policy.evaluate(1025).accepted
