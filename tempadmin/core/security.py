from __future__ import annotations

import os

from tempadmin.core.errors import PrivilegeRequiredError


def running_as_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


def require_root(action: str) -> None:
    if not running_as_root():
        raise PrivilegeRequiredError(f"'{action}' must be run as root (try sudo).", action=action)
