from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from tempadmin.core.config.io import atomic_write_text, remove_if_exists
from tempadmin.core.directory import validate_username
from tempadmin.core.errors import InvalidUsernameError


@dataclass
class SessionMarker:
    """Plain-text file holding the username of the single pending grant."""

    path: str
    logger: Optional[logging.Logger] = None

    def write(self, user: str) -> None:
        atomic_write_text(self.path, validate_username(user) + "\n", mode=0o600)

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    def read(self) -> Optional[str]:
        """Return the recorded username, or ``None`` if there is no usable marker."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError:
            return None
        lines = [line.strip() for line in raw.splitlines() if line.strip()]
        if not lines:
            return None
        try:
            return validate_username(lines[-1])
        except InvalidUsernameError:
            if self.logger is not None:
                self.logger.warning("Session marker %s holds an invalid username; ignoring it.", self.path)
            return None

    def clear(self) -> bool:
        return remove_if_exists(self.path)
