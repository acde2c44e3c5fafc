"""Run directory layout for wasmbench."""

from datetime import datetime
from pathlib import Path

from ..constants import DATE_DIR_FORMAT, TIME_DIR_FORMAT
from .writers import OutputError


def get_run_dir(root: Path, started_at: datetime) -> Path:
    """Return <root>/<YYYY_MM_DD>/<HH_MM_SS> for a run start time."""
    return root / started_at.strftime(DATE_DIR_FORMAT) / started_at.strftime(TIME_DIR_FORMAT)


def create_run_directory(root: Path, started_at: datetime | None = None) -> Path:
    """Create the run directory.

    Args:
        root: Output root directory
        started_at: Run start time (defaults to now)

    Returns:
        Path to the created run directory

    Raises:
        OutputError: If the directory cannot be created
    """
    run_dir = get_run_dir(root, started_at or datetime.now())
    try:
        run_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputError(f"Failed to create run directory {run_dir}: {e}") from e
    return run_dir
