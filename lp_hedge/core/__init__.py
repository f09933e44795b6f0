"""Core system components: config, errors, strategy driver, scheduler."""

from lp_hedge.core.config import Config, StrategyConfig
from lp_hedge.core.scheduler import Scheduler

__all__ = [
    "Config",
    "StrategyConfig",
    "Scheduler",
]
