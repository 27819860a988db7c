from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path

from dotenv import load_dotenv

"""Environment helper utilities.

Loads a `.env` file from the project root so that engine settings
(``MARKETPLACE_*`` variables) defined there become available via
``os.getenv``, and provides typed readers for those variables. Uses
`python-dotenv`, which is listed in `pyproject.toml` dependencies.
"""

__all__ = ["load_project_dotenv", "env_str", "env_float", "env_int", "env_decimal"]


def _find_project_root(start: Path | None = None) -> Path:
    """Traverse upwards until we find a directory that contains `pyproject.toml`."""
    current = start or Path(__file__).resolve().parent
    for _ in range(10):  # safety break
        if (current / "pyproject.toml").exists():
            return current
        if current.parent == current:
            break
        current = current.parent
    return Path(__file__).resolve().parent


def load_project_dotenv() -> None:
    """Load environment variables from the project-level `.env` if present."""
    project_root = _find_project_root()
    dotenv_path = project_root / ".env"
    if dotenv_path.exists():
        load_dotenv(dotenv_path=dotenv_path, override=False)


def env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def env_decimal(name: str, default: str) -> Decimal:
    raw = env_str(name, default)
    try:
        return Decimal(raw)
    except InvalidOperation as e:
        raise ValueError(f"{name} must be a decimal amount, got {raw!r}") from e
