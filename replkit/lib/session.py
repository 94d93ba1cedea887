"""
Session markers and identifiers.

Whether an interactive session is running, and how deeply sessions are
nested, is kept in an environment-style mapping (`os.environ` by default).
There is a single counter for the whole process lineage: a command that
starts another shell sees the outer depth, and so does any child process
the session launches. A shell records the markers on entry and puts them
back on exit, so an outer session sees its own depth again afterwards.

Commands can ask:
    from replkit.lib.session import session_context
    if session_context.active: ...
"""

import os
import uuid
from datetime import datetime
from typing import Final, MutableMapping, Optional
from replkit.lib.log import LOG
from replkit.models.dataModel import SessionMarker

SESSION_KEY: Final[str] = "REPLKIT_SESSION"
LEVEL_KEY: Final[str] = "REPLKIT_LEVEL"


def sessionID_generate(title: str = "") -> str:
    """
    Generate a unique session ID in the format YYYYMMDDHHmmSSmmm-<uuid>[-<title>].

    :param title: Optional title to include in the session ID.
    :return: A session ID string.
    """
    now = datetime.now()
    timestamp = now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 1000:03d}"
    unique_id = uuid.uuid4().hex
    session_id = f"{timestamp}-{unique_id}"
    if title:
        session_id += f"-{title}"
    return session_id


class SessionContext:
    """Reads and writes the process-wide session markers.

    Attributes:
        environ: The mapping holding the markers
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None) -> None:
        self.environ: MutableMapping[str, str] = (
            os.environ if environ is None else environ
        )

    @property
    def active(self) -> bool:
        return self.environ.get(SESSION_KEY) == "true"

    @property
    def depth(self) -> int:
        try:
            return max(int(self.environ.get(LEVEL_KEY, "0")), 0)
        except ValueError:
            return 0

    def marker(self) -> SessionMarker:
        return SessionMarker(active=self.active, depth=self.depth)

    def enter(self) -> SessionMarker:
        """Mark a new session as running one level deeper.

        Returns:
            SessionMarker: The markers as they were, to hand back to `exit`
        """
        prior: SessionMarker = self.marker()
        self.environ[SESSION_KEY] = "true"
        self.environ[LEVEL_KEY] = str(prior.depth + 1)
        LOG(f"Interactive session started, level {prior.depth + 1}")
        return prior

    def exit(self, prior: SessionMarker) -> None:
        """Restore the markers recorded by `enter`."""
        if prior.active:
            self.environ[SESSION_KEY] = "true"
            self.environ[LEVEL_KEY] = str(prior.depth)
        else:
            self.environ.pop(SESSION_KEY, None)
            self.environ.pop(LEVEL_KEY, None)
        LOG(f"Interactive session ended, back to level {prior.depth}")


# Process-wide default
session_context: SessionContext = SessionContext()
