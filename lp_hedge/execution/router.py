"""
Execution Router

Turns a RebalanceAction into a call on the futures order sink:
Increase -> open_sell, Decrease -> reduce-only close_sell.
No retries: a failed order propagates and aborts the cycle.
"""

import logging

from lp_hedge.execution.orders import ActionKind, ExecutionReport, RebalanceAction

logger = logging.getLogger(__name__)


class ExecutionRouter:
    """
    Order routing for the futures hedge leg.

    Implements:
    1. Skip when the action is None
    2. Increase: sell quantity to open/extend the short
    3. Decrease: reduce-only buy to shrink the short
    4. Dry-run: log the intended order only
    """

    def __init__(self, order_sink, symbol: str, dry_run: bool = False):
        """
        Initialize execution router.

        Args:
            order_sink: FuturesOrderSink implementation
            symbol: Futures instrument
            dry_run: Log orders instead of placing them
        """
        self.order_sink = order_sink
        self.symbol = symbol
        self.dry_run = dry_run
        self.orders_placed: int = 0

    def execute(self, action: RebalanceAction) -> ExecutionReport:
        """
        Execute one rebalance action.

        Args:
            action: Decision from RebalanceEngine

        Returns:
            ExecutionReport
        """
        if action.is_none:
            return ExecutionReport(action=action, status="skipped")

        if action.kind is ActionKind.INCREASE:
            verb, place = "open_sell", self.order_sink.open_sell
        elif action.kind is ActionKind.DECREASE:
            verb, place = "close_sell", self.order_sink.close_sell
        else:
            raise ValueError(f"Unsupported action kind: {action.kind}")

        if self.dry_run:
            logger.info("[dry-run] %s %s qty=%s", verb, self.symbol, action.quantity)
            return ExecutionReport(action=action, status="dry_run")

        logger.info("Placing %s %s qty=%s", verb, self.symbol, action.quantity)
        order = place(self.symbol, action.quantity)
        self.orders_placed += 1
        logger.info("Order accepted: oid=%s status=%s", order.oid, order.status)
        return ExecutionReport(action=action, status="submitted", order=order)
