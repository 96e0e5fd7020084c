from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from tempadmin.core.agent_script import RevocationAgentScript
from tempadmin.core.config.models import GrantConfig
from tempadmin.core.config.paths import TempAdminFsPaths
from tempadmin.core.directory import DirectoryService
from tempadmin.core.errors import LogCollectionWarning, TempAdminError
from tempadmin.core.launchd import LaunchdScheduler
from tempadmin.core.log_archive import LogCollector
from tempadmin.core.marker import SessionMarker
from tempadmin.core.ops_log import OpsLogger
from tempadmin.core.trace import resolve_trace_id


class GrantState(str, Enum):
    IDLE = "IDLE"
    GRANTED = "GRANTED"
    REVOKING = "REVOKING"
    REVOKED = "REVOKED"


@dataclass
class RevocationResult:
    trace_id: str
    state: GrantState
    user: Optional[str] = None
    removed_from_group: bool = False
    archive: Optional[str] = None
    deregistered: bool = False
    warnings: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["state"] = self.state.value
        return out


class RevocationAgent:
    """
    Runs once when the launchd timer fires: drop the admin membership recorded
    in the session marker, archive the system log for the window, and remove
    every trace of the grant including its own launchd registration.

    Without a marker this is a no-op, so a late or repeated fire is harmless.
    """

    def __init__(
        self,
        *,
        cfg: GrantConfig,
        fs: TempAdminFsPaths,
        directory: DirectoryService,
        scheduler: LaunchdScheduler,
        collector: LogCollector,
        ops_log: OpsLogger,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.cfg = cfg
        self.fs = fs
        self.directory = directory
        self.scheduler = scheduler
        self.collector = collector
        self.ops_log = ops_log
        self.logger = logger or logging.getLogger("tempadmin.revoke")
        self.marker = SessionMarker(self.fs.marker, logger=self.logger)
        self.state = GrantState.GRANTED if self.marker.exists() else GrantState.IDLE

    def run(self, *, trace_id: Optional[str] = None) -> RevocationResult:
        trace_id = resolve_trace_id(trace_id)
        if not self.marker.exists():
            self.state = GrantState.IDLE
            self.logger.info("No pending grant at %s; nothing to revoke.", self.fs.marker)
            self.ops_log.log(trace_id=trace_id, event="revoke.noop", outcome="ok", details={"marker": self.fs.marker})
            return RevocationResult(trace_id=trace_id, state=self.state)

        self.state = GrantState.REVOKING
        user = self.marker.read()
        result = RevocationResult(trace_id=trace_id, state=self.state, user=user)
        try:
            self._revoke(user, trace_id=trace_id, result=result)
        except TempAdminError as e:
            self.ops_log.log(trace_id=trace_id, event="revoke.failed", outcome="error", details={"user": user, "error": e.to_dict()})
            raise
        self.state = GrantState.REVOKED
        result.state = self.state
        self.ops_log.log(trace_id=trace_id, event="revoke.completed", outcome="ok", details=result.to_dict())

        # Last step: when launchd is running us, bootout ends this process.
        result.deregistered = self.scheduler.deregister(self.cfg.launchd_label)
        return result

    def _revoke(self, user: Optional[str], *, trace_id: str, result: RevocationResult) -> None:
        if user is None:
            self.logger.warning("Session marker is unreadable; cleaning up without a group edit.")
        else:
            if self.directory.is_member(user, self.cfg.admin_group):
                self.directory.remove_member(user, self.cfg.admin_group)
                result.removed_from_group = True
            else:
                self.logger.info("%s is no longer in %s", user, self.cfg.admin_group)
            result.archive = self._collect_logs(user, trace_id=trace_id, result=result)

        self.marker.clear()
        RevocationAgentScript(path=self.fs.agent_script, python=self.cfg.python_executable).remove()
        self.scheduler.remove(self.fs.descriptor)

    def _collect_logs(self, user: str, *, trace_id: str, result: RevocationResult) -> Optional[str]:
        try:
            return self.collector.collect(user, last_minutes=int(self.cfg.log_window_minutes or self.cfg.duration_minutes))
        except LogCollectionWarning as w:
            self.logger.warning("%s; continuing with revocation.", w.user_message)
            result.warnings.append(w.to_dict())
            self.ops_log.log(trace_id=trace_id, event="revoke.log_collection_failed", outcome="warn", details=w.to_dict())
            return None
