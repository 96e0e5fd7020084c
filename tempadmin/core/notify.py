from __future__ import annotations

from typing import Optional

from tempadmin.core.commands import CommandRunner

OSASCRIPT = "/usr/bin/osascript"


def _applescript_quote(text: str) -> str:
    return '"' + str(text).replace("\\", "\\\\").replace('"', '\\"') + '"'


class DialogNotifier:
    """Blocking AppleScript dialog; returns once the user dismisses it."""

    def __init__(self, *, runner: CommandRunner, timeout_seconds: Optional[float] = None) -> None:
        self.runner = runner
        self.timeout_seconds = timeout_seconds

    def build_script(self, *, title: str, message: str, button: str) -> str:
        btn = _applescript_quote(button)
        return (
            f"display dialog {_applescript_quote(message)} "
            f"with title {_applescript_quote(title)} "
            f"buttons {{{btn}}} default button 1 with icon caution"
        )

    def notify(self, *, title: str, message: str, button: str = "OK") -> None:
        script = self.build_script(title=title, message=message, button=button)
        self.runner.run([OSASCRIPT, "-e", script], timeout=self.timeout_seconds)
