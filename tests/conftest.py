"""Shared fixtures and venue fakes."""
import pytest

from lp_hedge.core.config import StrategyConfig
from lp_hedge.core.errors import CollaboratorFailure
from lp_hedge.execution.orders import OrderResult
from lp_hedge.monitor.snapshot import AmmPositionRecord, CexPosition

BASE = "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c"
USDT = "0x55d398326f99059fF775485246999027B3197955"
OTHER = "0x2170Ed0880ac9A755fd29B2688956BD959F933F8"
OWNER = "0x000000000000000000000000000000000000dEaD"
WEI = 10 ** 18

ENV_VARS = [
    "LPH_OWNER_ADDRESS", "LPH_POSITION_MANAGER", "LPH_BASE_TOKEN", "LPH_USDT_TOKEN",
    "LPH_SYMBOL", "LPH_RATIO_THRESHOLD", "LPH_DELTA_THRESHOLD", "LPH_RPC_URL",
    "HL_NETWORK", "HL_ADDRESS", "HL_SECRET_KEY",
    "TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def make_cfg(ratio_threshold=0.05, delta_threshold=0.1, symbol="BNB"):
    return StrategyConfig(
        owner_address=OWNER,
        position_manager_address="0x7b8A01B39D58278b5DE7e48c8449c9f4F5170613",
        base_token_address=BASE,
        usdt_token_address=USDT,
        symbol=symbol,
        ratio_threshold=ratio_threshold,
        delta_threshold=delta_threshold,
    )


def amm_record(base=12.0, usdt=3000.0, fee_base=0.5, fee_usdt=10.0, base_first=True, token_other=None):
    """LP record holding the given decimal amounts, token order selectable."""
    w_base, w_usdt = int(base * WEI), int(usdt * WEI)
    c_base, c_usdt = int(fee_base * WEI), int(fee_usdt * WEI)
    if token_other:
        return AmmPositionRecord(token_other, USDT, 1, w_base, w_usdt, c_base, c_usdt)
    if base_first:
        return AmmPositionRecord(BASE, USDT, 1, w_base, w_usdt, c_base, c_usdt)
    return AmmPositionRecord(USDT, BASE, 1, w_usdt, w_base, c_usdt, c_base)


def cex_position(position_amt="-5", mark_price="600", unrealized_pnl="-25.5", symbol="BNB", update_time=1700000000000):
    return CexPosition(
        symbol=symbol,
        position_amt=position_amt,
        mark_price=mark_price,
        unrealized_pnl=unrealized_pnl,
        update_time=update_time,
    )


class FakeAmmSource:
    def __init__(self, positions, block=4242, calls=None, fail=None):
        self._positions = positions
        self.block = block
        self.calls = calls if calls is not None else []
        self.fail = fail

    def sync(self, owner):
        self.calls.append(("sync", owner))
        if self.fail:
            raise CollaboratorFailure(self.fail)

    def positions(self):
        self.calls.append(("positions",))
        return dict(self._positions)

    def current_block(self):
        self.calls.append(("current_block",))
        return self.block


class FakeFuturesVenue:
    def __init__(self, positions, calls=None, order_error=None):
        self._positions = positions
        self.calls = calls if calls is not None else []
        self.order_error = order_error

    def get_position(self, symbol):
        self.calls.append(("get_position", symbol))
        return list(self._positions)

    def _order(self, verb, symbol, quantity, side, reduce_only):
        self.calls.append((verb, symbol, quantity))
        if self.order_error:
            raise CollaboratorFailure(self.order_error)
        return OrderResult(symbol=symbol, side=side, quantity=quantity, reduce_only=reduce_only, oid="1", status="filled")

    def open_sell(self, symbol, quantity):
        return self._order("open_sell", symbol, quantity, "Sell", False)

    def close_sell(self, symbol, quantity):
        return self._order("close_sell", symbol, quantity, "Buy", True)


class FakeNotifier:
    def __init__(self, calls=None):
        self.messages = []
        self.calls = calls if calls is not None else []

    def push(self, text):
        self.calls.append(("push",))
        self.messages.append(text)
