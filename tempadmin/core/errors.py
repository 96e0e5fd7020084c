from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence


class Severity(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class TempAdminError(Exception):
    code: str
    user_message: str
    severity: Severity = Severity.ERROR
    recoverable: bool = True
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.code)

    def __str__(self) -> str:
        return self.user_message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "recoverable": bool(self.recoverable),
            "context": dict(self.context or {}),
        }


class ConfigError(TempAdminError):
    def __init__(self, user_message: str = "Configuration error.", **ctx: Any):
        super().__init__("config_error", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)


class NoValidUserError(TempAdminError):
    def __init__(self, user_message: str = "No valid console user is logged in.", **ctx: Any):
        super().__init__("no_valid_user", user_message, severity=Severity.ERROR, recoverable=False, context=ctx)


class PrivilegeRequiredError(TempAdminError):
    def __init__(self, user_message: str = "This command must be run as root.", **ctx: Any):
        super().__init__("privilege_required", user_message, severity=Severity.ERROR, recoverable=False, context=ctx)


class InvalidUsernameError(TempAdminError):
    def __init__(self, user_message: str = "Invalid username.", **ctx: Any):
        super().__init__("invalid_username", user_message, severity=Severity.WARN, recoverable=False, context=ctx)


class CommandError(TempAdminError):
    def __init__(
        self,
        argv: Sequence[str],
        *,
        returncode: Optional[int] = None,
        stderr: str = "",
        user_message: Optional[str] = None,
    ):
        msg = user_message or f"Command failed ({returncode}): {' '.join(argv)}"
        super().__init__(
            "command_failed",
            msg,
            severity=Severity.ERROR,
            recoverable=False,
            context={"argv": list(argv), "returncode": returncode, "stderr": (stderr or "")[:500]},
        )
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr or ""


class LogCollectionWarning(TempAdminError):
    def __init__(self, user_message: str = "System log collection failed.", **ctx: Any):
        super().__init__("log_collection_failed", user_message, severity=Severity.WARN, recoverable=True, context=ctx)
