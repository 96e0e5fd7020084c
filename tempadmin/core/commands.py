from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from tempadmin.core.errors import CommandError

# Sentinel: use the runner default. Pass ``timeout=None`` to wait indefinitely.
_DEFAULT_TIMEOUT: Any = object()


@dataclass(frozen=True)
class CommandResult:
    argv: Sequence[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """
    Runs OS utilities in strict mode: a non-zero exit raises ``CommandError``
    unless the caller passes ``check=False`` to inspect the exit code itself.
    """

    def __init__(self, *, timeout_seconds: float = 120.0, logger: Optional[logging.Logger] = None) -> None:
        self.timeout_seconds = float(timeout_seconds)
        self.logger = logger or logging.getLogger("tempadmin.commands")

    def run(self, argv: Sequence[str], *, check: bool = True, timeout: Any = _DEFAULT_TIMEOUT) -> CommandResult:
        argv = [str(a) for a in argv]
        self.logger.debug("exec: %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds if timeout is _DEFAULT_TIMEOUT else timeout,
            )
        except FileNotFoundError as e:
            raise CommandError(argv, returncode=None, stderr=str(e), user_message=f"Command not found: {argv[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise CommandError(argv, returncode=None, stderr="timeout", user_message=f"Command timed out: {' '.join(argv)}") from e
        res = CommandResult(argv=argv, returncode=proc.returncode, stdout=proc.stdout or "", stderr=proc.stderr or "")
        if check and not res.ok:
            raise CommandError(argv, returncode=res.returncode, stderr=res.stderr)
        return res
