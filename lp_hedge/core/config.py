"""
Configuration management for the LP hedge monitor.

Strategy parameters, venue credentials, polling and monitoring settings.
Supports loading from YAML/dict and environment variable overrides.
"""

import logging
import math
import os
import sys
from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Literal, Optional

from lp_hedge.core.errors import ConfigurationError


@dataclass(frozen=True)
class StrategyConfig:
    """
    Identifiers and thresholds for one monitored hedge pair.

    Pure data: venue clients are injected separately into HedgeStrategy.
    """

    owner_address: str = ""  # Owner of the LP position NFTs
    position_manager_address: str = ""  # Uniswap V3 NonfungiblePositionManager
    base_token_address: str = ""  # BASE token (e.g. WBNB)
    usdt_token_address: str = ""  # Quote token (e.g. USDT)
    symbol: str = ""  # Futures instrument (e.g. "BNB")
    ratio_threshold: float = 0.05  # n: trigger when base_delta_ratio > n
    delta_threshold: float = 0.1  # m: trigger when |base_delta| > m; also the order step

    def __post_init__(self):
        """Reject thresholds the decision engine cannot work with."""
        try:
            m = float(self.delta_threshold)
            n = float(self.ratio_threshold)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"thresholds must be numeric: {e}") from e
        if not math.isfinite(m) or m <= 0:
            raise ConfigurationError(f"delta_threshold must be a positive finite number, got {self.delta_threshold!r}")
        if not math.isfinite(n):
            raise ConfigurationError(f"ratio_threshold must be finite, got {self.ratio_threshold!r}")
        object.__setattr__(self, "delta_threshold", m)
        object.__setattr__(self, "ratio_threshold", n)


@dataclass
class HyperliquidConfig:
    """Hyperliquid perp venue settings."""

    network: Literal["testnet", "mainnet"] = "mainnet"
    address: str = ""  # Main wallet address (from env)
    secret_key: str = ""  # API wallet private key (from env)
    slippage: float = 0.01  # Max slippage for market orders

    # API endpoint (auto-set by network)
    api_url: str = ""

    def __post_init__(self):
        """Set API URL based on network."""
        from hyperliquid.utils import constants

        if self.network == "testnet":
            self.api_url = constants.TESTNET_API_URL
        else:
            self.api_url = constants.MAINNET_API_URL


@dataclass
class ChainConfig:
    """RPC endpoint for the chain hosting the LP position."""

    rpc_url: str = "https://bsc-dataseed.binance.org"


@dataclass
class TelegramConfig:
    """Status message delivery. Empty token falls back to log output."""

    bot_token: str = ""
    chat_id: str = ""


@dataclass
class SchedulerConfig:
    """Polling cadence."""

    poll_interval_sec: float = 90.0


@dataclass
class MonitoringConfig:
    """Logging, status report and journaling."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["simple", "detailed", "json"] = "detailed"
    log_file: str = ""
    report_label: str = "BNB"  # Asset name shown in status messages
    journal_enabled: bool = False
    journal_dir: str = "data/state"
    max_consecutive_failures: int = 10  # Halt after N failed cycles in a row


def _build(dc_type, data):
    """Recursively build nested dataclasses from a plain dict."""
    if not is_dataclass(dc_type):
        return data
    kwargs = {}
    for f in fields(dc_type):
        if f.name in (data or {}):
            val = data[f.name]
            if hasattr(f.type, "__dataclass_fields__"):
                kwargs[f.name] = _build(f.type, val)
            else:
                kwargs[f.name] = val
    return dc_type(**kwargs)


@dataclass
class Config:
    """
    Complete system configuration.

    Load from YAML/environment variables.

    Environment variables (override config file):
    - LPH_OWNER_ADDRESS, LPH_POSITION_MANAGER, LPH_BASE_TOKEN, LPH_USDT_TOKEN
    - LPH_SYMBOL, LPH_RATIO_THRESHOLD, LPH_DELTA_THRESHOLD, LPH_RPC_URL
    - HL_NETWORK, HL_ADDRESS, HL_SECRET_KEY
    - TELEGRAM_BOT_TOKEN, TELEGRAM_CHAT_ID
    - LOG_LEVEL
    """

    strategy: StrategyConfig = field(default_factory=StrategyConfig)
    hyperliquid: HyperliquidConfig = field(default_factory=HyperliquidConfig)
    chain: ChainConfig = field(default_factory=ChainConfig)
    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def __post_init__(self):
        """Load environment variable overrides."""
        strategy_env = {
            "owner_address": "LPH_OWNER_ADDRESS",
            "position_manager_address": "LPH_POSITION_MANAGER",
            "base_token_address": "LPH_BASE_TOKEN",
            "usdt_token_address": "LPH_USDT_TOKEN",
            "symbol": "LPH_SYMBOL",
            "ratio_threshold": "LPH_RATIO_THRESHOLD",
            "delta_threshold": "LPH_DELTA_THRESHOLD",
        }
        overrides = {name: os.getenv(var) for name, var in strategy_env.items() if os.getenv(var)}
        if overrides:
            # StrategyConfig is frozen; replace() re-runs threshold validation
            self.strategy = replace(self.strategy, **overrides)

        if os.getenv("LPH_RPC_URL"):
            self.chain.rpc_url = os.getenv("LPH_RPC_URL", "")

        # Hyperliquid credentials from env
        if os.getenv("HL_NETWORK"):
            self.hyperliquid.network = os.getenv("HL_NETWORK", "mainnet")

        if os.getenv("HL_ADDRESS"):
            self.hyperliquid.address = os.getenv("HL_ADDRESS", "")

        if os.getenv("HL_SECRET_KEY"):
            self.hyperliquid.secret_key = os.getenv("HL_SECRET_KEY", "")

        # Re-initialize to set API URL
        self.hyperliquid.__post_init__()

        if os.getenv("TELEGRAM_BOT_TOKEN"):
            self.telegram.bot_token = os.getenv("TELEGRAM_BOT_TOKEN", "")

        if os.getenv("TELEGRAM_CHAT_ID"):
            self.telegram.chat_id = os.getenv("TELEGRAM_CHAT_ID", "")

        if os.getenv("LOG_LEVEL"):
            self.monitoring.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load config from YAML file."""
        import yaml

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return _build(cls, data)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Load config from dictionary."""
        return _build(cls, data)

    def validate(self, dry_run: bool = False) -> list[str]:
        """
        Validate configuration parameters.

        Thresholds are already checked by StrategyConfig; this reports
        missing identifiers and credentials.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        s = self.strategy

        required = {
            "owner_address": "LPH_OWNER_ADDRESS",
            "position_manager_address": "LPH_POSITION_MANAGER",
            "base_token_address": "LPH_BASE_TOKEN",
            "usdt_token_address": "LPH_USDT_TOKEN",
            "symbol": "LPH_SYMBOL",
        }
        from web3 import Web3

        for name, var in required.items():
            value = getattr(s, name)
            if not value:
                errors.append(f"strategy.{name} required ({var})")
            elif name.endswith("_address") and not Web3.is_address(str(value).lower()):
                errors.append(f"strategy.{name} is not a valid hex address: {value!r}")

        if s.base_token_address and s.base_token_address.lower() == s.usdt_token_address.lower():
            errors.append("strategy.base_token_address and usdt_token_address must differ")

        if not self.chain.rpc_url:
            errors.append("chain.rpc_url required (LPH_RPC_URL)")

        if not self.hyperliquid.address:
            errors.append("HL_ADDRESS environment variable required")

        if not dry_run and not self.hyperliquid.secret_key:
            errors.append("HL_SECRET_KEY environment variable required")

        if self.scheduler.poll_interval_sec <= 0:
            errors.append("scheduler.poll_interval_sec must be > 0")

        if self.monitoring.max_consecutive_failures < 1:
            errors.append("monitoring.max_consecutive_failures must be >= 1")

        return errors


def setup_logging(monitoring: Optional[MonitoringConfig] = None) -> None:
    """Configure root logging from monitoring settings."""
    monitoring = monitoring or MonitoringConfig()
    level = getattr(logging, str(monitoring.log_level).upper(), logging.INFO)

    if monitoring.log_format == "json":
        format_string = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
    elif monitoring.log_format == "detailed":
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    else:
        format_string = "%(levelname)s: %(message)s"

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if monitoring.log_file:
        handlers.append(logging.FileHandler(monitoring.log_file))
    for handler in handlers:
        handler.setFormatter(logging.Formatter(format_string))

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.getLogger("lp_hedge").setLevel(level)

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("web3").setLevel(logging.WARNING)
