"""
Collaborator interfaces consumed by the hedge strategy.

Concrete adapters live in lp_hedge.venues and lp_hedge.monitoring.notifier.
Implementations raise CollaboratorFailure on network/RPC errors.
"""

from typing import Any, List, Mapping, Protocol

from lp_hedge.execution.orders import OrderResult
from lp_hedge.monitor.snapshot import AmmPositionRecord, CexPosition


class AmmPositionSource(Protocol):
    """On-chain LP position table for one owner."""

    def sync(self, owner: str) -> None:
        """Refresh the internal position table."""
        ...

    def positions(self) -> Mapping[Any, AmmPositionRecord]:
        """Return positions keyed by token id, as of the last sync."""
        ...

    def current_block(self) -> int:
        ...


class FuturesPositionSource(Protocol):
    def get_position(self, symbol: str) -> List[CexPosition]:
        ...


class FuturesOrderSink(Protocol):
    def open_sell(self, symbol: str, quantity: str) -> OrderResult:
        """Add to the short."""
        ...

    def close_sell(self, symbol: str, quantity: str) -> OrderResult:
        """Reduce the short (reduce-only)."""
        ...


class Notifier(Protocol):
    def push(self, text: str) -> None:
        ...
