from tempadmin.core.launchd.models import TimerDescriptor
from tempadmin.core.launchd.scheduler import LaunchdScheduler

__all__ = ["LaunchdScheduler", "TimerDescriptor"]
