"""Environment helper utilities.

Loads a `.env` file from the project root so that the ``INVENTORY_RL_*``
settings (log level, episode budget, batch size, seed) defined there become
available via ``os.getenv``. Variables already set in the process win.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

__all__ = ["load_project_dotenv"]

MAX_PARENT_LEVELS = 10


def _find_project_root(start: Path | None = None) -> Path:
    """Walk upwards to the first directory holding `pyproject.toml`."""
    current = start or Path(__file__).resolve().parent
    for _ in range(MAX_PARENT_LEVELS):
        if (current / "pyproject.toml").exists():
            return current
        if current.parent == current:
            break
        current = current.parent
    return Path(__file__).resolve().parent


def load_project_dotenv() -> bool:
    """Load the project-level `.env` if present. Returns whether one was found."""
    dotenv_path = _find_project_root() / ".env"
    if not dotenv_path.exists():
        return False
    load_dotenv(dotenv_path=dotenv_path, override=False)
    return True
