"""
Hedge Strategy driver.

One poll cycle: refresh AMM state -> read futures position -> build
snapshot -> decide -> place order -> push status message.
Either the whole cycle completes or the first error propagates; no order
or message is produced from a partial read.
"""

import logging
from dataclasses import dataclass

from lp_hedge.core.config import StrategyConfig
from lp_hedge.execution.orders import ExecutionReport, RebalanceAction
from lp_hedge.execution.router import ExecutionRouter
from lp_hedge.monitor.snapshot import PositionSnapshot, build_snapshot, open_positions
from lp_hedge.monitor.sources import AmmPositionSource, FuturesOrderSink, FuturesPositionSource, Notifier
from lp_hedge.monitoring.report import DEFAULT_TEMPLATE, ReportFormatter
from lp_hedge.rebalance.engine import RebalanceEngine

logger = logging.getLogger(__name__)


@dataclass
class CycleResult:
    """Everything one completed cycle produced."""

    snapshot: PositionSnapshot
    action: RebalanceAction
    execution: ExecutionReport
    message: str

    def to_record(self) -> dict:
        record = self.snapshot.to_dict()
        record["action"] = self.action.kind.value
        record["quantity"] = self.action.quantity
        record["execution_status"] = self.execution.status
        return record


class HedgeStrategy:
    """
    Delta-neutral LP hedge monitor for one BASE/USDT pair.

    Coordinates the venue collaborators with the snapshot builder,
    decision engine and report formatter. Holds no state between cycles.
    """

    def __init__(
        self,
        config: StrategyConfig,
        amm_source: AmmPositionSource,
        futures_source: FuturesPositionSource,
        order_sink: FuturesOrderSink,
        notifier: Notifier,
        label: str = "BASE",
        dry_run: bool = False,
        template: str = DEFAULT_TEMPLATE,
    ):
        """
        Initialize strategy.

        Args:
            config: Strategy identifiers and thresholds
            amm_source: AmmPositionSource
            futures_source: FuturesPositionSource
            order_sink: FuturesOrderSink
            notifier: Notifier for status messages
            label: Base asset name used in status messages
            dry_run: Log orders instead of placing them
            template: Status message template
        """
        self.config = config
        self.amm_source = amm_source
        self.futures_source = futures_source
        self.notifier = notifier
        self.engine = RebalanceEngine(config)
        self.router = ExecutionRouter(order_sink, config.symbol, dry_run=dry_run)
        self.formatter = ReportFormatter(label, template)

    def status(self) -> PositionSnapshot:
        """Read both venues and build the cycle snapshot."""
        # Step 1: AMM leg
        self.amm_source.sync(self.config.owner_address)
        held = self.amm_source.positions()
        amm_positions = open_positions(held)
        if len(amm_positions) < len(held):
            logger.debug("Ignoring %d closed LP positions", len(held) - len(amm_positions))
        block_number = self.amm_source.current_block()

        # Step 2: futures leg
        cex_positions = self.futures_source.get_position(self.config.symbol)

        # Step 3: merge
        snapshot = build_snapshot(amm_positions, cex_positions, self.config, block_number)
        logger.info(
            "Snapshot block=%s amm_base=%.6f futures=%.6f delta=%.6f ratio=%.4f total=%.4f",
            snapshot.block_number, snapshot.amm_base_amount, snapshot.futures_position,
            snapshot.base_delta, snapshot.base_delta_ratio, snapshot.total_value_usdt,
        )
        return snapshot

    def run_cycle(self) -> CycleResult:
        """
        Execute one monitoring/rebalance cycle.

        Returns:
            CycleResult

        Raises:
            LPHedgeError subclasses from the builder or collaborators
        """
        snapshot = self.status()
        action = self.engine.decide_snapshot(snapshot)
        message = self.formatter.format(snapshot)

        execution = self.router.execute(action)
        self.notifier.push(message)

        return CycleResult(snapshot=snapshot, action=action, execution=execution, message=message)

    @property
    def dry_run(self) -> bool:
        return self.router.dry_run

    def describe(self) -> str:
        c = self.config
        return f"{c.symbol} hedge of {c.base_token_address}/{c.usdt_token_address} (n={c.ratio_threshold}, m={c.delta_threshold})"
