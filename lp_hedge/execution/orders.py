"""
Order data structures (RebalanceAction, OrderResult, ExecutionReport).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Literal, Optional


class ActionKind(str, Enum):
    NONE = "none"
    INCREASE = "increase"  # Add to the short hedge
    DECREASE = "decrease"  # Reduce the short hedge (reduce-only)


@dataclass(frozen=True)
class RebalanceAction:
    """
    Decision for one cycle.

    quantity is a positive decimal string quantized to the delta step,
    or None when no rebalance is needed.
    """

    kind: ActionKind = ActionKind.NONE
    quantity: Optional[str] = None

    @classmethod
    def none(cls) -> "RebalanceAction":
        return cls(ActionKind.NONE, None)

    @classmethod
    def increase(cls, quantity: str) -> "RebalanceAction":
        return cls(ActionKind.INCREASE, quantity)

    @classmethod
    def decrease(cls, quantity: str) -> "RebalanceAction":
        return cls(ActionKind.DECREASE, quantity)

    @property
    def is_none(self) -> bool:
        return self.kind is ActionKind.NONE

    def __str__(self) -> str:
        if self.is_none:
            return "None"
        return f"{self.kind.value.capitalize()}({self.quantity})"


@dataclass
class OrderResult:
    """Venue acknowledgement for one order."""

    symbol: str
    side: Literal["Buy", "Sell"]
    quantity: str
    reduce_only: bool = False
    oid: Optional[str] = None  # Order ID from exchange
    status: str = "submitted"
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ExecutionReport:
    """
    Outcome of routing one RebalanceAction.

    status: "skipped" (no action), "dry_run", or "submitted"
    """

    action: RebalanceAction
    status: Literal["skipped", "dry_run", "submitted"] = "skipped"
    order: Optional[OrderResult] = None
