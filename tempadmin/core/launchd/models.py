from __future__ import annotations

import plistlib
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class TimerDescriptor(BaseModel):
    """A launchd job that runs ``program_arguments`` every ``start_interval`` seconds."""

    model_config = ConfigDict(extra="forbid", frozen=True)
    label: str = Field(min_length=1)
    program_arguments: List[str] = Field(min_length=1)
    start_interval: int = Field(ge=1)
    run_at_load: bool = False

    def to_plist_dict(self) -> Dict[str, Any]:
        return {
            "Label": self.label,
            "ProgramArguments": list(self.program_arguments),
            "StartInterval": int(self.start_interval),
            "RunAtLoad": bool(self.run_at_load),
        }

    def to_plist_bytes(self) -> bytes:
        return plistlib.dumps(self.to_plist_dict(), fmt=plistlib.FMT_XML, sort_keys=True)

    @classmethod
    def from_plist_bytes(cls, data: bytes) -> "TimerDescriptor":
        obj = plistlib.loads(data)
        return cls(
            label=obj["Label"],
            program_arguments=list(obj["ProgramArguments"]),
            start_interval=int(obj["StartInterval"]),
            run_at_load=bool(obj.get("RunAtLoad", False)),
        )
