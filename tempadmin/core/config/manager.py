from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from tempadmin.core.config.io import read_json_file
from tempadmin.core.config.models import GrantConfig
from tempadmin.core.config.paths import TempAdminFsPaths
from tempadmin.core.errors import ConfigError


class ConfigManager:
    """
    Loads the JSON config file into a validated ``GrantConfig``.

    A missing default file means defaults. A corrupt or invalid file, or an
    explicitly named file that is missing, is fatal: the tool edits group
    membership as root, so it never guesses.
    """

    def __init__(self, *, fs: TempAdminFsPaths, config_path: Optional[str] = None, logger: Optional[logging.Logger] = None):
        self.fs = fs
        self.explicit = config_path is not None
        self.config_path = config_path or fs.config_file
        self.logger = logger
        self._cfg: Optional[GrantConfig] = None

    def load(self) -> GrantConfig:
        rr = read_json_file(self.config_path)
        if not rr.ok and (rr.error != "missing" or self.explicit):
            raise ConfigError(f"Cannot read config file {self.config_path}: {rr.error}", path=self.config_path)
        if not rr.ok and self.logger is not None:
            self.logger.info("No config file at %s; using defaults.", self.config_path)
        self._cfg = self.validate(rr.data, path=self.config_path)
        return self._cfg

    def get(self) -> GrantConfig:
        if self._cfg is None:
            return self.load()
        return self._cfg

    def paths(self) -> TempAdminFsPaths:
        cfg = self.get()
        return TempAdminFsPaths(root=self.fs.root, label=cfg.launchd_label)

    @staticmethod
    def validate(data: Dict[str, Any], *, path: str = "<memory>") -> GrantConfig:
        try:
            return GrantConfig.model_validate(data or {})
        except ValidationError as e:
            errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
            raise ConfigError(f"Invalid config {path}: " + "; ".join(errors), path=path, errors=errors) from e
