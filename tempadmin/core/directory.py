from __future__ import annotations

import logging
import re
from typing import Optional

import psutil

from tempadmin.core.commands import CommandRunner
from tempadmin.core.errors import InvalidUsernameError, NoValidUserError

DSEDITGROUP = "/usr/sbin/dseditgroup"

# Accounts that can own the console without being a real interactive user.
NON_INTERACTIVE_USERS = frozenset({"root", "loginwindow", "_mbsetupuser"})

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$")


def validate_username(name: str) -> str:
    name = (name or "").strip()
    if not name or len(name) > 255 or not _USERNAME_RE.match(name):
        raise InvalidUsernameError(f"Invalid username: {name!r}", username=name)
    return name


class DirectoryService:
    """Console session lookup and admin group edits via Directory Services."""

    def __init__(self, *, runner: CommandRunner, logger: Optional[logging.Logger] = None) -> None:
        self.runner = runner
        self.logger = logger or logging.getLogger("tempadmin.directory")

    def console_user(self) -> str:
        for session in psutil.users():
            if str(getattr(session, "terminal", "") or "") != "console":
                continue
            name = str(session.name or "").strip()
            if not name or name in NON_INTERACTIVE_USERS:
                continue
            try:
                return validate_username(name)
            except InvalidUsernameError:
                self.logger.warning("Ignoring console session with invalid username %r", name)
        raise NoValidUserError()

    def is_member(self, user: str, group: str) -> bool:
        res = self.runner.run([DSEDITGROUP, "-o", "checkmember", "-m", validate_username(user), group], check=False)
        return res.ok

    def add_member(self, user: str, group: str) -> None:
        self.runner.run([DSEDITGROUP, "-o", "edit", "-a", validate_username(user), "-t", "user", group])
        self.logger.info("Added %s to group %s", user, group)

    def remove_member(self, user: str, group: str) -> None:
        self.runner.run([DSEDITGROUP, "-o", "edit", "-d", validate_username(user), "-t", "user", group])
        self.logger.info("Removed %s from group %s", user, group)
