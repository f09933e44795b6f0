"""
Hyperliquid perp venue adapter.

Position source and order sink for the futures hedge leg, built on the
Hyperliquid Python SDK. Numeric fields are passed through as the venue's
decimal strings; parsing belongs to the snapshot builder.
"""

import logging
from typing import Dict, List, Optional, Tuple

from eth_account import Account
from hyperliquid.exchange import Exchange
from hyperliquid.info import Info

from lp_hedge.core.config import HyperliquidConfig
from lp_hedge.core.errors import CollaboratorFailure
from lp_hedge.execution.orders import OrderResult
from lp_hedge.monitor.snapshot import CexPosition

logger = logging.getLogger(__name__)


class HyperliquidFuturesVenue:
    """
    Futures position source + order sink.

    - get_position: clearinghouse state + asset contexts (mark price)
    - open_sell: market sell (extends the short)
    - close_sell: reduce-only market close of part of the short
    """

    def __init__(self, config: HyperliquidConfig, info: Info, exchange: Optional[Exchange] = None):
        """
        Initialize venue.

        Args:
            config: Hyperliquid settings (address, slippage)
            info: Info client for reads
            exchange: Exchange client for orders (None = read-only)
        """
        self.config = config
        self.info = info
        self.exchange = exchange

    @classmethod
    def from_config(cls, config: HyperliquidConfig, read_only: bool = False) -> "HyperliquidFuturesVenue":
        info = Info(config.api_url, skip_ws=True)
        exchange = None
        if not read_only:
            # Create LocalAccount from private key for Exchange
            wallet = Account.from_key(config.secret_key)
            exchange = Exchange(wallet, config.api_url, account_address=config.address or None)
        return cls(config, info, exchange)

    # ------------------------
    # FuturesPositionSource
    # ------------------------

    def _mark_prices(self) -> Dict[str, str]:
        """coin -> markPx string from metaAndAssetCtxs."""
        meta, asset_ctxs = self.info.meta_and_asset_ctxs()
        return {
            meta["universe"][i]["name"]: ctx.get("markPx")
            for i, ctx in enumerate(asset_ctxs)
        }

    def get_position(self, symbol: str) -> List[CexPosition]:
        """
        Fetch the position for symbol.

        A flat account still yields one zero-size entry when the coin is
        listed, so "no hedge yet" is distinguishable from "unknown symbol".
        """
        try:
            state = self.info.user_state(self.config.address)
            marks = self._mark_prices()
        except Exception as e:
            raise CollaboratorFailure(f"Hyperliquid position read failed: {e}") from e

        # Left raw: a missing time is rejected by the snapshot builder
        update_time = state.get("time")
        positions: List[CexPosition] = []
        for ap in state.get("assetPositions", []):
            pos = ap.get("position", {})
            if pos.get("coin") != symbol:
                continue
            positions.append(
                CexPosition(
                    symbol=symbol,
                    position_amt=pos.get("szi"),
                    mark_price=marks.get(symbol),
                    unrealized_pnl=pos.get("unrealizedPnl"),
                    update_time=update_time,
                )
            )

        if not positions and marks.get(symbol) is not None:
            positions.append(
                CexPosition(
                    symbol=symbol,
                    position_amt="0",
                    mark_price=marks[symbol],
                    unrealized_pnl="0",
                    update_time=update_time,
                )
            )
        return positions

    # ------------------------
    # FuturesOrderSink
    # ------------------------

    def open_sell(self, symbol: str, quantity: str) -> OrderResult:
        """Market sell to extend the short."""
        exchange = self._require_exchange()
        try:
            resp = exchange.market_open(symbol, False, float(quantity), None, self.config.slippage)
        except Exception as e:
            raise CollaboratorFailure(f"Hyperliquid open_sell failed: {e}") from e
        oid, status = self._parse_order_response(resp)
        return OrderResult(symbol=symbol, side="Sell", quantity=quantity, reduce_only=False, oid=oid, status=status, raw=resp)

    def close_sell(self, symbol: str, quantity: str) -> OrderResult:
        """Reduce-only market buy that shrinks the short."""
        exchange = self._require_exchange()
        try:
            resp = exchange.market_close(symbol, float(quantity), None, self.config.slippage)
        except Exception as e:
            raise CollaboratorFailure(f"Hyperliquid close_sell failed: {e}") from e
        oid, status = self._parse_order_response(resp)
        return OrderResult(symbol=symbol, side="Buy", quantity=quantity, reduce_only=True, oid=oid, status=status, raw=resp)

    # ------------------------
    # Helpers
    # ------------------------

    def _require_exchange(self) -> Exchange:
        if self.exchange is None:
            raise CollaboratorFailure("Hyperliquid venue is read-only; no Exchange client configured")
        return self.exchange

    @staticmethod
    def _parse_order_response(resp) -> Tuple[Optional[str], str]:
        """Extract (oid, status) from an order response; raise on venue rejection."""
        if not resp or resp.get("status") != "ok":
            raise CollaboratorFailure(f"Hyperliquid order rejected: {resp}")
        statuses = resp.get("response", {}).get("data", {}).get("statuses", [])
        for st in statuses:
            if "error" in st:
                raise CollaboratorFailure(f"Hyperliquid order error: {st['error']}")
            if "filled" in st:
                return str(st["filled"].get("oid")), "filled"
            if "resting" in st:
                return str(st["resting"].get("oid")), "resting"
        return None, "submitted"
