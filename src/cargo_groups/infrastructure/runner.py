"""Spawn cargo and propagate its exit status."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from pathlib import Path

from cargo_groups.infrastructure.workspace import WorkspaceError

logger = logging.getLogger(__name__)


def find_cargo(name: str = "cargo") -> str:
    """Resolve the cargo binary on PATH.

    Raises:
        WorkspaceError: If *name* cannot be found.
    """
    found = shutil.which(name)
    if found is None:
        msg = f"{name} not found on PATH"
        raise WorkspaceError(msg)
    return found


def format_command(cargo: str, args: list[str]) -> str:
    """Render a command line for logs and ``--dry-run`` output."""
    return shlex.join([Path(cargo).name, *args])


def run_cargo(cargo: str, args: list[str], cwd: Path) -> int:
    """Run ``cargo <args>`` in *cwd*, inheriting stdio, and wait for it.

    Returns cargo's exit code; termination by a signal maps to 1.
    """
    logger.info("Running command: %s", format_command(cargo, args))
    try:
        proc = subprocess.run([cargo, *args], cwd=cwd, check=False)
    except OSError as exc:
        msg = f"Failed to run {cargo}: {exc}"
        raise WorkspaceError(msg) from exc
    return proc.returncode if proc.returncode >= 0 else 1
