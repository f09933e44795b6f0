"""
LP Hedge Monitor

Keeps a Uniswap V3 LP position and a perp futures short delta-neutral.

Components:
- Snapshot Builder: Merges AMM and futures position reads into one snapshot
- Rebalance Engine: Threshold rule -> Increase/Decrease/None with quantized size
- Report Formatter: Template-based status message
- Hedge Strategy: One cycle of read -> decide -> order -> notify
- Scheduler: Fixed-interval polling
- Venues: Uniswap V3 (web3) and Hyperliquid (SDK) adapters
- Monitoring: Metrics, notifier, kill-switch
"""

__version__ = "0.1.0"

from lp_hedge.core.config import Config, StrategyConfig
from lp_hedge.core.scheduler import Scheduler
from lp_hedge.core.strategy import HedgeStrategy

__all__ = [
    "Config",
    "StrategyConfig",
    "Scheduler",
    "HedgeStrategy",
]
