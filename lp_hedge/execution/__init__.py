"""Execution Router: maps rebalance actions onto futures orders."""

from lp_hedge.execution.router import ExecutionRouter
from lp_hedge.execution.orders import ActionKind, ExecutionReport, OrderResult, RebalanceAction

__all__ = ["ExecutionRouter", "ActionKind", "ExecutionReport", "OrderResult", "RebalanceAction"]
