"""Subprocess wrapper with error handling."""

from __future__ import annotations

import subprocess

from helm_drift.config import DEFAULT_TIMEOUT


class RunError(Exception):
    """Raised when a subprocess cannot be started or exits with non-zero status."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"Command {cmd!r} failed (exit {returncode}): {stderr.strip()}"
        )


def run(cmd: list[str], timeout: int = DEFAULT_TIMEOUT) -> str:
    """Run subprocess, capture stdout, raise on non-zero exit."""
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise RunError(cmd, 127, f"{cmd[0]}: executable not found") from e
    except subprocess.TimeoutExpired as e:
        raise RunError(cmd, -1, f"timed out after {timeout}s") from e
    if result.returncode != 0:
        raise RunError(cmd, result.returncode, result.stderr)
    return result.stdout
