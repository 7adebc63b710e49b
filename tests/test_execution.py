"""Tests for command execution."""

import pytest

from clusterprep.execution import CommandRunner, run_command_async


@pytest.mark.asyncio
async def test_output_and_returncode():
    output, returncode = await run_command_async("echo hello")

    assert output == "hello"
    assert returncode == 0


@pytest.mark.asyncio
async def test_failure_reports_stderr():
    output, returncode = await run_command_async("echo oops >&2; exit 3")

    assert returncode == 3
    assert output == "oops"


@pytest.mark.asyncio
async def test_env_is_passed():
    output, _ = await run_command_async(
        'echo "$CLUSTERPREP_TEST"', env={"CLUSTERPREP_TEST": "value", "PATH": "/usr/bin:/bin"}
    )

    assert output == "value"


@pytest.mark.asyncio
async def test_timeout():
    output, returncode = await run_command_async("sleep 5", timeout=0.1)

    assert returncode == 1
    assert "timed out" in output


def test_which_respects_path(tmp_path):
    tool = tmp_path / "mytool"
    tool.write_text("#!/bin/sh\n")
    tool.chmod(0o755)

    runner = CommandRunner()

    assert runner.which("mytool", path=str(tmp_path)) == str(tool)
    assert runner.which("mytool", path="/nonexistent") is None


def test_redact_hides_bearer_tokens():
    from clusterprep.execution import redact

    command = "curl -fsSL -H 'Authorization: Bearer ghp_secret' https://api.github.com/x"

    assert "ghp_secret" not in redact(command)
    assert "Bearer ***" in redact(command)
