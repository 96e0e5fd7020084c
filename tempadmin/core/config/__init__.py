from tempadmin.core.config.manager import ConfigManager
from tempadmin.core.config.models import GrantConfig
from tempadmin.core.config.paths import TempAdminFsPaths

__all__ = ["ConfigManager", "GrantConfig", "TempAdminFsPaths"]
