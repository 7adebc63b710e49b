"""Async command execution utilities."""

import asyncio
import logging
import re
import shutil
from typing import Mapping, Tuple

DEFAULT_TIMEOUT = 30
PROBE_TIMEOUT = 10

_logging = logging.getLogger(__name__)

_BEARER = re.compile(r"Bearer [^'\"\s]+")


def redact(command: str) -> str:
    return _BEARER.sub("Bearer ***", command)


async def run_command_async(
    command: str,
    timeout: float | None = DEFAULT_TIMEOUT,
    env: Mapping[str, str] | None = None,
) -> Tuple[str, int]:
    """Run a shell command and return its output and return code.

    Never raises: timeouts and OS errors are reported as a non-zero return
    code with a message in place of the output. ``timeout=None`` waits for as
    long as the command runs.
    """
    process = None
    try:
        _logging.debug(f"Running command: {redact(command)}")
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=dict(env) if env is not None else None,
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=timeout
            )
            output = stdout.decode(errors="replace").strip()
            if stderr:
                _logging.debug(f"stderr: {stderr.decode(errors='replace').strip()}")
            if process.returncode and not output and stderr:
                output = stderr.decode(errors="replace").strip()
            return output, process.returncode if process.returncode is not None else 1
        except asyncio.TimeoutError:
            process.kill()
            _ = await process.wait()
            _logging.error(f"Command timed out after {timeout} seconds: {redact(command)}")
            return f"Command timed out after {timeout} seconds", 1
    except Exception as e:
        _logging.error(f"Command execution failed: {type(e).__name__}: {e} | Command: {redact(command)}")
        return f"Error: {str(e)}", 1
    finally:
        if process:
            transport = getattr(process, "_transport", None)
            if transport:
                transport.close()


class CommandRunner:
    """Runs host commands for the installer components.

    Components take a runner instead of calling subprocess directly so tests
    can substitute a recording fake.
    """

    async def run(
        self,
        command: str,
        *,
        env: Mapping[str, str] | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
    ) -> Tuple[str, int]:
        return await run_command_async(command, timeout=timeout, env=env)

    def which(self, name: str, path: str | None = None) -> str | None:
        return shutil.which(name, path=path)


__all__ = [
    "DEFAULT_TIMEOUT",
    "PROBE_TIMEOUT",
    "run_command_async",
    "CommandRunner",
]
