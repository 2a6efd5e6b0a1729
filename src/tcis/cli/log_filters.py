"""Filtering for `tcis logs` output."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def latest_log_file(logs_dir: Path) -> Path | None:
    if not logs_dir.exists():
        return None
    log_files = sorted(logs_dir.glob("*.log"), key=lambda path: path.stat().st_mtime)
    return log_files[-1] if log_files else None


def filter_logs(
    lines: Sequence[str],
    pattern: str | None,
    limit: int,
    levels: set[str] | None,
) -> list[str]:
    filtered = [line for line in lines if matches_filter(line, pattern, levels)]
    if limit <= 0:
        return []
    return filtered[-limit:]


def resolve_log_levels(
    level_args: Sequence[str] | None, errors_only: bool
) -> set[str] | None:
    """
    Combine ``--level`` values and ``--errors`` into one level set.

    Raises:
        ValueError: If a level name is not recognised.
    """
    levels = _normalize_log_levels(level_args)
    if errors_only:
        error_levels = {"ERROR", "CRITICAL"}
        return error_levels if levels is None else levels | error_levels
    return levels


def extract_log_level(line: str) -> str | None:
    # Lines look like "2024-01-01 12:00:00.000 INFO [logger] message".
    parts = line.split(" ", 3)
    if len(parts) < 3:
        return None
    level = parts[2].strip().upper()
    return level if level in LOG_LEVELS else None


def matches_filter(line: str, pattern: str | None, levels: set[str] | None) -> bool:
    if pattern is not None and pattern.lower() not in line.lower():
        return False
    if levels is None:
        return True
    level = extract_log_level(line)
    return level is not None and level in levels


def _normalize_log_levels(level_args: Sequence[str] | None) -> set[str] | None:
    if not level_args:
        return None
    normalized: set[str] = set()
    for arg in level_args:
        for raw in arg.split(","):
            token = raw.strip().upper()
            if not token:
                continue
            if token not in LOG_LEVELS:
                raise ValueError(f"Unknown log level: {token}")
            normalized.add(token)
    return normalized or None
