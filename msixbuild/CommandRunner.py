# CommandRunner.py
"""
Subprocess invocation for the Windows SDK tools.

Tools run to completion with captured output. Their stdout is forwarded to the
log; on failure the tool's own stderr is carried by ToolExecutionError.
"""
import logging
import subprocess
from pathlib import Path
from typing import Iterable, Optional, Sequence

from msixbuild.errors import ToolExecutionError

logger = logging.getLogger(__name__)

REDACTED = "<redacted>"


def format_command(command: Sequence[str], secrets: Iterable[str] = ()) -> str:
    """
    Renders a command line for logging with secret arguments masked.

    Args:
        command: Executable path followed by its arguments
        secrets: Argument values that must never appear in logs

    Returns:
        Space-joined command line
    """
    hidden = {secret for secret in secrets if secret}
    return " ".join(REDACTED if arg in hidden else str(arg) for arg in command)


class SubprocessRunner:
    """Runs external tools with subprocess.run and fails on non-zero exit codes."""

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Seconds before a tool is killed (None waits indefinitely)
        """
        self._timeout = timeout

    def run(self, command: Sequence[str], cwd: Optional[Path] = None) -> None:
        """
        Runs a tool and blocks until it exits.

        Raises:
            ToolExecutionError: On a non-zero exit code or timeout
        """
        tool_name = Path(command[0]).name

        try:
            result = subprocess.run(
                [str(arg) for arg in command],
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            raise ToolExecutionError(f"{tool_name} timed out after {self._timeout} seconds") from None
        except OSError as e:
            raise ToolExecutionError(f"Unable to start {tool_name}: {e}") from e

        for line in (result.stdout or "").splitlines():
            if line.strip():
                logger.info(f"  {line}")

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            message = f"{tool_name} failed (exit code {result.returncode})"
            if stderr:
                message += f":\n{stderr}"
            raise ToolExecutionError(message, returncode=result.returncode, stderr=stderr)

        if result.stderr and result.stderr.strip():
            logger.warning(f"{tool_name} stderr: {result.stderr.strip()}")
