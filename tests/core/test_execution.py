"""Execution Types — tests for request defaults and the runtime command line.

Tests cover:
    - Request defaults: typed variant, 30 s timeout, stable features only
    - Source file names embed the execution id and language extension
    - The capability grant is network-only regardless of request flags
"""

from codemode.core.domain_types import ExecutionId, FailureKind, SourceLanguage
from codemode.core.execution import (
    CAPABILITY_GRANT,
    DEFAULT_TIMEOUT_MS,
    ExecutionFailure,
    ExecutionRequest,
    ExecutionSuccess,
    build_runtime_command,
    source_filename,
)


def test_request_defaults():
    request = ExecutionRequest(source_code="console.log(1)")
    assert request.is_typed_variant is True
    assert request.timeout_ms == DEFAULT_TIMEOUT_MS == 30_000
    assert request.allow_unstable_features is False
    assert request.language is SourceLanguage.TYPESCRIPT


def test_untyped_request_is_javascript():
    request = ExecutionRequest(source_code="x", is_typed_variant=False)
    assert request.language is SourceLanguage.JAVASCRIPT


def test_source_filename():
    execution_id = ExecutionId("0123abcd")
    assert source_filename(execution_id, SourceLanguage.TYPESCRIPT) == "deno-0123abcd.ts"
    assert source_filename(execution_id, SourceLanguage.JAVASCRIPT) == "deno-0123abcd.js"


def test_runtime_command_grants_network_only():
    command = build_runtime_command("deno", "/tmp/deno-x.ts")
    assert command == ["deno", "run", "--no-prompt", "--allow-net", "/tmp/deno-x.ts"]
    assert CAPABILITY_GRANT == ("net",)


def test_unstable_flag_adds_no_capability():
    command = build_runtime_command("deno", "/tmp/deno-x.ts", allow_unstable=True)
    assert command == [
        "deno", "run", "--no-prompt", "--allow-net", "--unstable", "/tmp/deno-x.ts",
    ]
    assert [flag for flag in command if flag.startswith("--allow-")] == ["--allow-net"]


def test_outcome_variants_report_success():
    assert ExecutionSuccess(stdout="", stderr="").succeeded is True
    failure = ExecutionFailure(kind=FailureKind.TIMEOUT, message="late")
    assert failure.succeeded is False
