"""
Snapshot Builder

Merges one AMM LP position record and one perp futures position record
into a normalized PositionSnapshot with hedge-exposure metrics.

Flow:
1. Select the LP position whose token pair equals {BASE, USDT} (either order)
2. Map token0/token1 amounts onto base/usdt and convert from fixed point
3. Select the futures position for the configured symbol
4. Parse the venue's string-encoded numeric fields
5. Derive delta, ratio and valuations
"""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Tuple

from lp_hedge.core.config import StrategyConfig
from lp_hedge.core.errors import AmbiguousMatchError, MalformedDataError, NotFoundError
from lp_hedge.utils.math_helpers import base_delta, delta_ratio
from lp_hedge.utils.precision import AMM_TOKEN_DECIMALS, from_fixed_point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AmmPositionRecord:
    """
    One LP position as read from the position manager contract.

    Amounts are raw unsigned fixed-point integers.
    """

    token0: str
    token1: str
    liquidity: int
    withdrawable0: int  # token0 received if all liquidity is removed
    withdrawable1: int
    collectable0: int  # token0 fees not yet collected
    collectable1: int


@dataclass(frozen=True)
class CexPosition:
    """
    One futures position as reported by the venue.

    Numeric fields stay string-encoded; build_snapshot owns parsing.
    """

    symbol: str
    position_amt: str  # Signed size in base units
    mark_price: str
    unrealized_pnl: str
    update_time: Any  # Epoch milliseconds (int or integer string)


@dataclass(frozen=True)
class PositionSnapshot:
    """Combined AMM + futures state for one cycle."""

    block_number: int
    symbol: str
    amm_base_amount: float
    amm_usdt_amount: float
    amm_collectable_base: float
    amm_collectable_usdt: float
    amm_collectable_value_usdt: float
    futures_position: float  # Positive = long, negative = short
    unrealized_pnl: float
    futures_timestamp: int
    base_price_usdt: float
    base_delta: float  # amm_base_amount + futures_position
    base_delta_ratio: float
    amm_total_value_usdt: float
    total_value_usdt: float  # AMM value plus unrealized PnL

    @property
    def amm_base_value_usdt(self) -> float:
        return self.amm_base_amount * self.base_price_usdt

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _same_address(a: str, b: str) -> bool:
    """Hex addresses compare case-insensitively (checksum casing varies)."""
    return str(a).lower() == str(b).lower()


def holds_pair(record: AmmPositionRecord, base_token: str, usdt_token: str) -> bool:
    """True if the record's token set is exactly {base_token, usdt_token}."""
    return (_same_address(record.token0, base_token) and _same_address(record.token1, usdt_token)) or (
        _same_address(record.token0, usdt_token) and _same_address(record.token1, base_token)
    )


def is_closed(record: AmmPositionRecord) -> bool:
    """No liquidity and nothing left to collect: the NFT is just a leftover."""
    return record.liquidity == 0 and record.collectable0 == 0 and record.collectable1 == 0


def open_positions(positions: Mapping[Any, AmmPositionRecord]) -> Dict[Any, AmmPositionRecord]:
    """Drop closed positions so an old emptied NFT for the same pair is not a second match."""
    return {token_id: pos for token_id, pos in positions.items() if not is_closed(pos)}


def select_amm_position(
    positions: Mapping[Any, AmmPositionRecord],
    base_token: str,
    usdt_token: str,
) -> Tuple[Any, AmmPositionRecord]:
    """
    Find the single LP position holding exactly {base_token, usdt_token}.

    Args:
        positions: token_id -> AmmPositionRecord
        base_token: BASE token address
        usdt_token: USDT token address

    Returns:
        (token_id, record)

    Raises:
        NotFoundError: no position holds the pair
        AmbiguousMatchError: more than one position holds the pair
    """
    matches = [(token_id, pos) for token_id, pos in positions.items() if holds_pair(pos, base_token, usdt_token)]
    if not matches:
        raise NotFoundError(
            f"No matching AMM position found for base_token={base_token} and usdt_token={usdt_token}"
        )
    if len(matches) > 1:
        ids = ", ".join(str(token_id) for token_id, _ in matches)
        raise AmbiguousMatchError(
            f"{len(matches)} AMM positions match base_token={base_token} and usdt_token={usdt_token} "
            f"(token ids: {ids})"
        )
    return matches[0]


def select_cex_position(positions: List[CexPosition], symbol: str) -> CexPosition:
    """Find the single futures position for symbol."""
    matches = [p for p in positions if p.symbol == symbol]
    if not matches:
        raise NotFoundError(f"No matching futures position found for symbol={symbol}")
    if len(matches) > 1:
        raise AmbiguousMatchError(f"{len(matches)} futures positions match symbol={symbol}")
    return matches[0]


def parse_decimal(field_name: str, raw: Any) -> float:
    """Parse a venue decimal string. Never substitutes a default."""
    if not isinstance(raw, str):
        raise MalformedDataError(field_name, raw, "expected a decimal string")
    try:
        value = float(raw.strip())
    except ValueError as e:
        raise MalformedDataError(field_name, raw, str(e)) from e
    if not math.isfinite(value):
        raise MalformedDataError(field_name, raw, "value is not finite")
    return value


def parse_timestamp(field_name: str, raw: Any) -> int:
    """Parse an epoch-millisecond timestamp (int or integer string)."""
    if isinstance(raw, bool):
        raise MalformedDataError(field_name, raw, "expected an integer timestamp")
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError as e:
        raise MalformedDataError(field_name, raw, str(e)) from e


def _split_base_usdt(record: AmmPositionRecord, base_token: str) -> Tuple[int, int, int, int]:
    """Return (withdrawable_base, withdrawable_usdt, collectable_base, collectable_usdt)."""
    if _same_address(record.token0, base_token):
        return record.withdrawable0, record.withdrawable1, record.collectable0, record.collectable1
    return record.withdrawable1, record.withdrawable0, record.collectable1, record.collectable0


def build_snapshot(
    amm_positions: Mapping[Any, AmmPositionRecord],
    cex_positions: List[CexPosition],
    cfg: StrategyConfig,
    block_number: int,
) -> PositionSnapshot:
    """
    Merge venue reads into a PositionSnapshot.

    Args:
        amm_positions: LP positions keyed by token id
        cex_positions: Futures positions returned for cfg.symbol
        cfg: Strategy identifiers
        block_number: Chain height of the AMM read

    Returns:
        PositionSnapshot

    Raises:
        NotFoundError: missing (or ambiguous) AMM/futures position
        MalformedDataError: unparsable venue field
    """
    # Step 1: AMM leg
    token_id, record = select_amm_position(amm_positions, cfg.base_token_address, cfg.usdt_token_address)
    w_base, w_usdt, c_base, c_usdt = _split_base_usdt(record, cfg.base_token_address)

    amm_base_amount = from_fixed_point(w_base, AMM_TOKEN_DECIMALS, "withdrawable_base")
    amm_usdt_amount = from_fixed_point(w_usdt, AMM_TOKEN_DECIMALS, "withdrawable_usdt")
    amm_collectable_base = from_fixed_point(c_base, AMM_TOKEN_DECIMALS, "collectable_base")
    amm_collectable_usdt = from_fixed_point(c_usdt, AMM_TOKEN_DECIMALS, "collectable_usdt")

    # Step 2: futures leg
    cex = select_cex_position(cex_positions, cfg.symbol)
    futures_position = parse_decimal("position_amt", cex.position_amt)
    unrealized_pnl = parse_decimal("unrealized_pnl", cex.unrealized_pnl)
    base_price_usdt = parse_decimal("mark_price", cex.mark_price)
    futures_timestamp = parse_timestamp("update_time", cex.update_time)

    # Step 3: metrics
    delta = base_delta(amm_base_amount, futures_position)
    ratio = delta_ratio(amm_base_amount, futures_position)

    amm_total_value_usdt = amm_base_amount * base_price_usdt + amm_usdt_amount
    amm_collectable_value_usdt = amm_collectable_base * base_price_usdt + amm_collectable_usdt
    total_value_usdt = amm_total_value_usdt + unrealized_pnl

    logger.debug(
        "Matched AMM position %s and %s futures position at block %s",
        token_id, cex.symbol, block_number,
    )

    return PositionSnapshot(
        block_number=int(block_number),
        symbol=cfg.symbol,
        amm_base_amount=amm_base_amount,
        amm_usdt_amount=amm_usdt_amount,
        amm_collectable_base=amm_collectable_base,
        amm_collectable_usdt=amm_collectable_usdt,
        amm_collectable_value_usdt=amm_collectable_value_usdt,
        futures_position=futures_position,
        unrealized_pnl=unrealized_pnl,
        futures_timestamp=futures_timestamp,
        base_price_usdt=base_price_usdt,
        base_delta=delta,
        base_delta_ratio=ratio,
        amm_total_value_usdt=amm_total_value_usdt,
        total_value_usdt=total_value_usdt,
    )
