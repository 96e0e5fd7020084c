from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class TempAdminFsPaths:
    """Fixed locations used by the grantor and the revocation agent.

    Every path is resolved under ``root`` so a whole install can be relocated
    (tests use a temporary directory).
    """

    root: str = "/"
    label: str = "com.tempadmin.removeAdmin"

    def _under(self, *parts: str) -> str:
        return os.path.join(self.root, *parts)

    @property
    def state_dir(self) -> str:
        return self._under("private", "var", "userToRemove")

    @property
    def support_dir(self) -> str:
        return self._under("Library", "Application Support", "TempAdmin")

    @property
    def launch_daemons_dir(self) -> str:
        return self._under("Library", "LaunchDaemons")

    @property
    def log_dir(self) -> str:
        return self._under("var", "log", "tempadmin")

    # Files
    @property
    def marker(self) -> str:
        return os.path.join(self.state_dir, "user")

    @property
    def agent_script(self) -> str:
        return os.path.join(self.support_dir, "removeAdminRights.py")

    @property
    def descriptor(self) -> str:
        return os.path.join(self.launch_daemons_dir, f"{self.label}.plist")

    @property
    def log_archive_dir(self) -> str:
        return self.state_dir

    @property
    def config_file(self) -> str:
        return self._under("Library", "Preferences", "com.tempadmin.json")

    @property
    def ops_log(self) -> str:
        return os.path.join(self.log_dir, "ops.jsonl")
