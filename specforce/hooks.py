"""Running user-defined hook commands in parallel."""

from __future__ import annotations

import subprocess
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable

from .errors import SpecforceError


@dataclass
class HookResult:
    """Outcome of one external command."""

    command: str = ""
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    success: bool = False


class HookError(SpecforceError):
    """One or more hooks failed; ``results`` holds every hook's outcome."""

    default_message = "one or more hooks failed"

    def __init__(self, results: Iterable[HookResult]) -> None:
        super().__init__()
        self.results = list(results)


def _run(command: str) -> tuple[HookResult, bool]:
    parts = command.split()
    if not parts:
        return HookResult(), False
    try:
        completed = subprocess.run(
            parts, capture_output=True, text=True, errors="replace", check=False
        )
    except OSError:
        return HookResult(command=command, exit_code=-1, success=False), True

    if completed.returncode == 0:
        result = HookResult(
            command=command,
            stdout=completed.stdout,
            stderr=completed.stderr,
            exit_code=0,
            success=True,
        )
        return result, False

    exit_code = completed.returncode if completed.returncode > 0 else -1
    result = HookResult(
        command=command,
        stdout=completed.stdout,
        stderr=completed.stderr,
        exit_code=exit_code,
        success=False,
    )
    return result, True


def execute_hooks(commands: Iterable[str]) -> list[HookResult]:
    """Run the commands in parallel; raise HookError if any exits unsuccessfully."""
    command_list = list(commands)
    if not command_list:
        return []

    with ThreadPoolExecutor(max_workers=len(command_list)) as pool:
        outcomes = list(pool.map(_run, command_list))

    results = [result for result, _ in outcomes]
    if any(failed for _, failed in outcomes):
        raise HookError(results)
    return results