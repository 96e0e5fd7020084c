from __future__ import annotations

import logging
import os
import time
from typing import Callable, Optional

from tempadmin.core.commands import CommandRunner
from tempadmin.core.directory import validate_username
from tempadmin.core.errors import CommandError, LogCollectionWarning

LOG = "/usr/bin/log"


class LogCollector:
    """Collects a unified-log archive covering the privileged window."""

    def __init__(
        self,
        *,
        runner: CommandRunner,
        archive_dir: str,
        timeout_seconds: float = 600.0,
        logger: Optional[logging.Logger] = None,
        now: Optional[Callable[[], float]] = None,
    ) -> None:
        self.runner = runner
        self.archive_dir = archive_dir
        self.timeout_seconds = float(timeout_seconds)
        self.logger = logger or logging.getLogger("tempadmin.log_archive")
        self._now = now or time.time

    def archive_path(self, user: str) -> str:
        stamp = time.strftime("%Y%m%dT%H%M%SZ", time.gmtime(self._now()))
        return os.path.join(self.archive_dir, f"{validate_username(user)}-{stamp}.logarchive")

    def collect(self, user: str, *, last_minutes: int) -> str:
        """Write the archive and return its path; raises ``LogCollectionWarning`` on any failure."""
        out = self.archive_path(user)
        try:
            os.makedirs(self.archive_dir, exist_ok=True)
            self.runner.run(
                [LOG, "collect", "--last", f"{int(last_minutes)}m", "--output", out],
                timeout=self.timeout_seconds,
            )
        except CommandError as e:
            raise LogCollectionWarning(f"Log collection for {user} failed: {e.user_message}", user=user, output=out, returncode=e.returncode) from e
        except OSError as e:
            raise LogCollectionWarning(f"Log collection for {user} failed: {e}", user=user, output=out) from e
        self.logger.info("Collected %d minutes of system logs to %s", int(last_minutes), out)
        return out
