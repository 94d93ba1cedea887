"""
Line history persistence.

History is loaded once when a session starts and saved once when it ends.
Both directions are best effort: a missing, unreadable or unwritable file is
logged and the session carries on with empty or unsaved history.
"""

from pathlib import Path
from typing import Optional
from replkit.config.settings import HISTORY_LENGTH
from replkit.lib.log import LOG


def history_load(path: str | Path) -> list[str]:
    """Read history lines, oldest first.

    Args:
        path: History file; `~` is expanded

    Returns:
        The stored lines, or an empty list if the file is missing or unreadable
    """
    history_file: Path = Path(path).expanduser()
    if not history_file.exists():
        return []
    try:
        with history_file.open(encoding="utf-8", newline="") as f:
            text: str = f.read()
    except (OSError, UnicodeDecodeError) as e:
        LOG(f"Could not load history from {history_file}: {e}")
        return []

    # Only "\n" separates entries; other line breaks belong to the line.
    lines: list[str] = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def history_save(
    path: str | Path, lines: list[str], limit: Optional[int] = HISTORY_LENGTH
) -> bool:
    """Write history lines, keeping the most recent `limit` in order.

    Args:
        path: History file; `~` is expanded and parent directories created
        lines: Lines to store, oldest first
        limit: Maximum number of lines kept; None keeps all

    Returns:
        bool: True if the file was written
    """
    history_file: Path = Path(path).expanduser()
    kept: list[str] = lines if limit is None else lines[-limit:] if limit else []
    try:
        history_file.parent.mkdir(parents=True, exist_ok=True)
        history_file.write_text(
            "".join(f"{line}\n" for line in kept), encoding="utf-8", newline=""
        )
        return True
    except OSError as e:
        LOG(f"Could not save history to {history_file}: {e}")
        return False
