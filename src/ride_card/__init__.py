"""Ride Card - ride statistics and SVG summary cards from GPX tracks."""

import subprocess
from pathlib import Path

__version_date__ = "2026-10-18"


def get_git_hash() -> str:
    """Short commit hash of the checkout this package lives in, or 'unknown'."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=Path(__file__).resolve().parent,
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    return result.stdout.strip() if result.returncode == 0 else "unknown"
