from __future__ import annotations

import logging
import os
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional

from tempadmin.core.agent_script import RevocationAgentScript
from tempadmin.core.config.models import GrantConfig
from tempadmin.core.config.paths import TempAdminFsPaths
from tempadmin.core.directory import DirectoryService
from tempadmin.core.errors import TempAdminError
from tempadmin.core.launchd import LaunchdScheduler, TimerDescriptor
from tempadmin.core.marker import SessionMarker
from tempadmin.core.notify import DialogNotifier
from tempadmin.core.ops_log import OpsLogger
from tempadmin.core.security import require_root
from tempadmin.core.trace import resolve_trace_id


def _iso(ts: float) -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(ts))


@dataclass(frozen=True)
class GrantResult:
    trace_id: str
    user: str
    already_admin: bool
    agent_script: str
    descriptor: str
    revoke_at: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TemporaryAdminGrantor:
    def __init__(
        self,
        *,
        cfg: GrantConfig,
        fs: TempAdminFsPaths,
        directory: DirectoryService,
        notifier: DialogNotifier,
        scheduler: LaunchdScheduler,
        ops_log: OpsLogger,
        config_path: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
        now: Optional[Callable[[], float]] = None,
        privilege_check: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.cfg = cfg
        self.fs = fs
        self.directory = directory
        self.notifier = notifier
        self.scheduler = scheduler
        self.ops_log = ops_log
        self.config_path = config_path
        self.logger = logger or logging.getLogger("tempadmin.grant")
        self._now = now or time.time
        self._privilege_check = privilege_check or require_root
        self.marker = SessionMarker(self.fs.marker, logger=self.logger)

    def agent_script(self) -> RevocationAgentScript:
        return RevocationAgentScript(
            path=self.fs.agent_script,
            python=self.cfg.python_executable,
            root=self.fs.root,
            config_path=self.config_path,
        )

    def descriptor(self) -> TimerDescriptor:
        return TimerDescriptor(
            label=self.cfg.launchd_label,
            program_arguments=self.agent_script().program_arguments(),
            start_interval=self.cfg.duration_seconds,
            run_at_load=self.cfg.run_at_load,
        )

    def grant(self, *, trace_id: Optional[str] = None) -> GrantResult:
        trace_id = resolve_trace_id(trace_id)
        # Nothing is mutated before both checks pass.
        self._privilege_check("grant")
        user = self.directory.console_user()

        self.ops_log.log(trace_id=trace_id, event="grant.started", outcome="ok", details={"user": user})
        try:
            result = self._grant(user, trace_id=trace_id)
        except TempAdminError as e:
            self.ops_log.log(trace_id=trace_id, event="grant.failed", outcome="error", details={"user": user, "error": e.to_dict()})
            raise
        self.ops_log.log(trace_id=trace_id, event="grant.completed", outcome="ok", details=result.to_dict())
        return result

    def _grant(self, user: str, *, trace_id: str) -> GrantResult:
        cfg = self.cfg
        self.notifier.notify(title=cfg.dialog_title, message=cfg.render_dialog_message(), button=cfg.dialog_button)

        self.marker.write(user)

        already_admin = self.directory.is_member(user, cfg.admin_group)
        if already_admin:
            self.logger.info("%s is already a member of %s; leaving membership unchanged.", user, cfg.admin_group)
        else:
            self.directory.add_member(user, cfg.admin_group)

        now = self._now()
        script = self.agent_script()
        script.write(generated_at=_iso(now))
        self.scheduler.write(self.descriptor(), self.fs.descriptor)
        self.scheduler.register(self.fs.descriptor, cfg.launchd_label)

        revoke_at = _iso(now + cfg.duration_seconds)
        self.logger.info("Granted %s admin rights until %s (trace %s)", user, revoke_at, trace_id)
        return GrantResult(
            trace_id=trace_id,
            user=user,
            already_admin=already_admin,
            agent_script=script.path,
            descriptor=self.fs.descriptor,
            revoke_at=revoke_at,
        )


def grant_status(
    *,
    cfg: GrantConfig,
    fs: TempAdminFsPaths,
    directory: DirectoryService,
    scheduler: LaunchdScheduler,
) -> Dict[str, Any]:
    """Read-only view of the pending grant, if any."""
    marker = SessionMarker(fs.marker)
    user = marker.read()
    descriptor = scheduler.read(fs.descriptor)
    return {
        "pending": user is not None,
        "user": user,
        "is_admin": directory.is_member(user, cfg.admin_group) if user else None,
        "marker_exists": marker.exists(),
        "agent_script_exists": os.path.exists(fs.agent_script),
        "descriptor": descriptor.to_plist_dict() if descriptor is not None else None,
        "descriptor_corrupt": descriptor is None and os.path.exists(fs.descriptor),
    }
