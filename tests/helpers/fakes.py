from __future__ import annotations

import os
from collections import namedtuple
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set

from tempadmin.core.commands import CommandResult
from tempadmin.core.errors import CommandError

FakeSession = namedtuple("FakeSession", ["name", "terminal", "host", "started", "pid"])


def console_session(name: str, terminal: str = "console") -> FakeSession:
    return FakeSession(name=name, terminal=terminal, host=None, started=1_700_000_000.0, pid=None)


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self._t = float(start)

    def time(self) -> float:
        return self._t

    def advance(self, seconds: float) -> None:
        self._t += float(seconds)


@dataclass
class FakeRunner:
    """
    Stands in for CommandRunner: simulates dseditgroup membership, launchctl
    registrations, osascript and `log collect` without touching the OS.
    """

    members: Dict[str, Set[str]] = field(default_factory=lambda: {"admin": set()})
    loaded: Set[str] = field(default_factory=set)
    log_returncode: int = 0
    dialog_returncode: int = 0
    remove_returncode: int = 0
    calls: List[List[str]] = field(default_factory=list)
    timeouts: List[Any] = field(default_factory=list)

    def run(self, argv: Sequence[str], *, check: bool = True, timeout: Any = None) -> CommandResult:
        argv = [str(a) for a in argv]
        self.calls.append(argv)
        self.timeouts.append(timeout)
        rc = self._dispatch(argv)
        res = CommandResult(argv=argv, returncode=rc, stdout="", stderr="" if rc == 0 else "simulated failure")
        if check and rc != 0:
            raise CommandError(argv, returncode=rc, stderr=res.stderr)
        return res

    def _dispatch(self, argv: List[str]) -> int:
        prog = os.path.basename(argv[0])
        if prog == "dseditgroup":
            return self._dseditgroup(argv[1:])
        if prog == "launchctl":
            return self._launchctl(argv[1:])
        if prog == "osascript":
            return self.dialog_returncode
        if prog == "log":
            if self.log_returncode == 0:
                out = argv[argv.index("--output") + 1]
                os.makedirs(out, exist_ok=True)
            return self.log_returncode
        return 127

    def _dseditgroup(self, args: List[str]) -> int:
        group = args[-1]
        members = self.members.setdefault(group, set())
        if args[:2] == ["-o", "checkmember"]:
            return 0 if args[3] in members else 67
        if args[:2] == ["-o", "edit"]:
            flag, user = args[2], args[3]
            if flag == "-a":
                members.add(user)
            elif flag == "-d":
                if self.remove_returncode != 0:
                    return self.remove_returncode
                members.discard(user)
            return 0
        return 64

    def _launchctl(self, args: List[str]) -> int:
        if args[0] == "load":
            label = os.path.basename(args[-1])[: -len(".plist")]
            self.loaded.add(label)
            return 0
        if args[0] == "bootout":
            label = args[1].split("/", 1)[1]
            if label not in self.loaded:
                return 113
            self.loaded.discard(label)
            return 0
        return 64

    # -- helpers for assertions --
    def commands(self, prog: str) -> List[List[str]]:
        return [c for c in self.calls if os.path.basename(c[0]) == prog]

    def edits(self, flag: Optional[str] = None) -> List[List[str]]:
        out = [c for c in self.commands("dseditgroup") if c[1:3] == ["-o", "edit"]]
        if flag is not None:
            out = [c for c in out if c[3] == flag]
        return out
