from __future__ import annotations

import logging
import os
import plistlib
from typing import Optional
from xml.parsers.expat import ExpatError

from pydantic import ValidationError

from tempadmin.core.commands import CommandRunner
from tempadmin.core.config.io import atomic_write_bytes, remove_if_exists
from tempadmin.core.errors import CommandError
from tempadmin.core.launchd.models import TimerDescriptor
from tempadmin.core.security import running_as_root

LAUNCHCTL = "/bin/launchctl"

# launchctl exit codes for "no such process" / "could not find service".
NOT_LOADED_CODES = frozenset({3, 113})


class LaunchdScheduler:
    """Writes the timer descriptor to LaunchDaemons and (de)registers it with launchd."""

    def __init__(self, *, runner: CommandRunner, logger: Optional[logging.Logger] = None) -> None:
        self.runner = runner
        self.logger = logger or logging.getLogger("tempadmin.launchd")

    def write(self, descriptor: TimerDescriptor, path: str) -> None:
        atomic_write_bytes(path, descriptor.to_plist_bytes(), mode=0o644)
        # launchd refuses daemon plists not owned by root:wheel.
        if running_as_root():
            os.chown(path, 0, 0)

    def read(self, path: str) -> Optional[TimerDescriptor]:
        """The descriptor at ``path``; ``None`` if it is missing or cannot be parsed."""
        try:
            with open(path, "rb") as f:
                return TimerDescriptor.from_plist_bytes(f.read())
        except FileNotFoundError:
            return None
        except (plistlib.InvalidFileException, ExpatError, KeyError, TypeError, ValueError, ValidationError) as e:
            self.logger.warning("Ignoring unreadable launchd descriptor %s: %s", path, e)
            return None

    def register(self, path: str, label: str) -> None:
        # Replace a stale registration from an earlier grant; "not loaded" is fine.
        self.runner.run([LAUNCHCTL, "bootout", f"system/{label}"], check=False)
        self.runner.run([LAUNCHCTL, "load", "-w", path])
        self.logger.info("Registered launchd job %s", label)

    def deregister(self, label: str) -> bool:
        """Boot the job out of the system domain; ``False`` if it was not loaded."""
        res = self.runner.run([LAUNCHCTL, "bootout", f"system/{label}"], check=False)
        if res.ok:
            return True
        if res.returncode in NOT_LOADED_CODES:
            self.logger.info("launchd job %s was not loaded", label)
            return False
        raise CommandError(res.argv, returncode=res.returncode, stderr=res.stderr)

    def remove(self, path: str) -> bool:
        return remove_if_exists(path)
