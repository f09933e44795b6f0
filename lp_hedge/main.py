"""
Main entry point for the LP hedge monitor.

Wires venues into HedgeStrategy and runs it on the poll scheduler:
Scheduler -> AMM/futures reads -> Snapshot -> Decision -> Order -> Status message.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from lp_hedge.core.config import Config, StrategyConfig, setup_logging
from lp_hedge.core.errors import ConfigurationError, LPHedgeError
from lp_hedge.core.scheduler import Scheduler
from lp_hedge.core.strategy import CycleResult, HedgeStrategy
from lp_hedge.monitor.snapshot import holds_pair, is_closed
from lp_hedge.monitoring.kill_switch import KillSwitch
from lp_hedge.monitoring.metrics import MetricsCollector
from lp_hedge.monitoring.notifier import LogNotifier, TelegramNotifier
from lp_hedge.utils.precision import from_fixed_point
from lp_hedge.utils.state_store import StateStore

logger = logging.getLogger(__name__)

# Settings the positions command needs; venue credentials are not required
POSITIONS_CONFIG_FIELDS = ("strategy.owner_address", "strategy.position_manager_address", "chain.rpc_url")


class LPHedgeSystem:
    """
    Main orchestrator for the LP hedge monitor.

    Runs HedgeStrategy cycles, tracks metrics, journals results and halts
    via the kill switch after repeated failures.
    """

    def __init__(self, config: Config, strategy: HedgeStrategy, state_store: Optional[StateStore] = None):
        """
        Initialize system.

        Args:
            config: System configuration
            strategy: Strategy with venues already injected
            state_store: Optional journal for completed cycles
        """
        self.config = config
        self.strategy = strategy
        self.state_store = state_store
        self.metrics = MetricsCollector(config.monitoring)
        self.kill_switch = KillSwitch(config.monitoring)
        self.scheduler = Scheduler(config, self.cycle)

    @classmethod
    def from_config(cls, config: Config, dry_run: bool = False) -> "LPHedgeSystem":
        """Build concrete venues (Uniswap V3 + Hyperliquid + Telegram) from config."""
        from lp_hedge.venues.hyperliquid import HyperliquidFuturesVenue
        from lp_hedge.venues.uniswap_v3 import UniswapV3PositionSource

        s = config.strategy
        amm = UniswapV3PositionSource.from_rpc(config.chain.rpc_url, s.position_manager_address)
        futures = HyperliquidFuturesVenue.from_config(config.hyperliquid, read_only=dry_run)

        if config.telegram.bot_token and config.telegram.chat_id:
            notifier = TelegramNotifier(config.telegram.bot_token, config.telegram.chat_id)
        else:
            logger.info("No Telegram chat configured; status messages go to the log")
            notifier = LogNotifier()

        strategy = HedgeStrategy(
            s,
            amm_source=amm,
            futures_source=futures,
            order_sink=futures,
            notifier=notifier,
            label=config.monitoring.report_label,
            dry_run=dry_run,
        )
        store = StateStore(config.monitoring.journal_dir) if config.monitoring.journal_enabled else None
        return cls(config, strategy, store)

    def cycle(self) -> Optional[CycleResult]:
        """
        Execute one cycle.

        Hedge errors are recorded and logged; the cycle produces no order
        or message. Returns None when halted or failed.
        """
        if self.kill_switch.triggered:
            logger.warning("HALTED: %s", self.kill_switch.reason)
            self.scheduler.stop()
            return None

        try:
            result = self.strategy.run_cycle()
        except LPHedgeError as e:
            logger.error("Cycle aborted: %s: %s", type(e).__name__, e)
            self._record_failure(e)
            return None
        except Exception as e:
            logger.exception("Cycle aborted by unexpected error")
            self._record_failure(e)
            return None

        self.metrics.record_cycle(result.snapshot, result.action)
        if self.state_store is not None:
            self.state_store.append_jsonl("cycles", result.to_record())
        return result

    def _record_failure(self, error: Exception):
        """Count the failure and halt polling once the streak hits the limit."""
        self.metrics.record_failure(error)
        if self.kill_switch.check(self.metrics.snapshot()):
            self.kill_switch.trigger(self.kill_switch.reason)
            self.scheduler.stop()

    def run(self, once: bool = False):
        """Run the monitor (blocks until stopped unless once=True)."""
        logger.info("Monitoring %s%s", self.strategy.describe(), " [dry-run]" if self.strategy.dry_run else "")
        if once:
            self.scheduler.run_once()
            return
        try:
            self.scheduler.run_forever()
        except KeyboardInterrupt:
            logger.info("Shutdown signal received")
            self.scheduler.stop()


def list_positions(source, strategy: StrategyConfig) -> List[str]:
    """
    Sync the owner's LP positions and render one line per NFT.

    Positions holding the configured pair and closed positions are tagged
    so an operator can see why a cycle fails with a missing or ambiguous match.
    """
    source.sync(strategy.owner_address)
    positions = source.positions()
    lines = [f"LP positions of {strategy.owner_address} at block {source.current_block()}:"]
    if not positions:
        lines.append("  (none)")
    for token_id, pos in sorted(positions.items()):
        tags = []
        if holds_pair(pos, strategy.base_token_address, strategy.usdt_token_address):
            tags.append("hedged pair")
        if is_closed(pos):
            tags.append("closed")
        lines.append(
            f"  #{token_id} {pos.token0}/{pos.token1} liquidity={pos.liquidity}"
            f" withdrawable={from_fixed_point(pos.withdrawable0):.6f}/{from_fixed_point(pos.withdrawable1):.6f}"
            f" collectable={from_fixed_point(pos.collectable0):.6f}/{from_fixed_point(pos.collectable1):.6f}"
            + (f" [{', '.join(tags)}]" if tags else "")
        )
    return lines


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Delta-neutral LP hedge monitor")
    parser.add_argument(
        "command", nargs="?", default="run", choices=["run", "positions"],
        help="run: poll and hedge (default); positions: list the owner's LP positions and exit",
    )
    parser.add_argument("--config", type=str, default="", help="Path to YAML config file")
    parser.add_argument("--dry-run", action="store_true", help="Run without placing any orders")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    args = parser.parse_args()

    # Load .env if present (before Config) to populate LPH_*/HL_* variables
    load_dotenv(dotenv_path=Path.cwd() / ".env")

    # Load config (defaults + env overrides or YAML)
    try:
        config = Config.from_yaml(args.config) if args.config else Config()
    except ConfigurationError as e:
        print(f"[ERROR] Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.monitoring)

    errors = config.validate(dry_run=args.dry_run)
    if args.command == "positions":
        errors = [e for e in errors if e.startswith(POSITIONS_CONFIG_FIELDS)]
    if errors:
        logger.error("Configuration validation failed:\n%s", "\n".join(f"  - {e}" for e in errors))
        sys.exit(1)

    if args.command == "positions":
        from lp_hedge.venues.uniswap_v3 import UniswapV3PositionSource

        source = UniswapV3PositionSource.from_rpc(config.chain.rpc_url, config.strategy.position_manager_address)
        try:
            lines = list_positions(source, config.strategy)
        except LPHedgeError as e:
            logger.error("Failed to list positions: %s", e)
            sys.exit(1)
        print("\n".join(lines))
        return

    system = LPHedgeSystem.from_config(config, dry_run=args.dry_run)
    system.run(once=args.once)


if __name__ == "__main__":
    main()
