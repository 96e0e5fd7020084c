from __future__ import annotations

import re
import sys
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_LABEL_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class GrantConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    admin_group: str = "admin"
    duration_minutes: int = Field(default=30, ge=1, le=1440)
    log_window_minutes: Optional[int] = Field(default=None, ge=1, le=10080)
    launchd_label: str = "com.tempadmin.removeAdmin"
    run_at_load: bool = False
    dialog_title: str = "Temporary admin rights"
    dialog_message: str = (
        "You now have administrative rights for {minutes} minutes. "
        "DO NOT ABUSE THIS PRIVILEGE. Your session will be logged for audit."
    )
    dialog_button: str = "OK"
    python_executable: str = Field(default_factory=lambda: sys.executable or "/usr/bin/python3")
    command_timeout_seconds: float = Field(default=120.0, gt=0)
    log_collect_timeout_seconds: float = Field(default=600.0, gt=0)

    @field_validator("launchd_label")
    @classmethod
    def _label_shape(cls, v: str) -> str:
        if not _LABEL_RE.match(v):
            raise ValueError("launchd_label must be a reverse-DNS style identifier")
        return v

    @field_validator("admin_group")
    @classmethod
    def _group_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("admin_group must not be empty")
        return v

    @model_validator(mode="after")
    def _default_log_window(self) -> "GrantConfig":
        if self.log_window_minutes is None:
            self.log_window_minutes = self.duration_minutes
        return self

    @property
    def duration_seconds(self) -> int:
        return int(self.duration_minutes) * 60

    def render_dialog_message(self) -> str:
        return self.dialog_message.replace("{minutes}", str(self.duration_minutes))
