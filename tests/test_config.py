"""Tests for configuration loading, env overrides and validation."""
import math

import pytest
from hyperliquid.utils import constants

from lp_hedge.core.config import Config, StrategyConfig
from lp_hedge.core.errors import ConfigurationError

from conftest import BASE, OWNER, USDT, make_cfg


def test_strategy_thresholds_are_coerced_to_float():
    cfg = StrategyConfig(symbol="BNB", ratio_threshold="0.05", delta_threshold="1")
    assert cfg.ratio_threshold == 0.05
    assert cfg.delta_threshold == 1.0


@pytest.mark.parametrize("m", [0, -0.1, math.nan, math.inf, "abc"])
def test_strategy_rejects_bad_delta_threshold(m):
    with pytest.raises(ConfigurationError):
        make_cfg(delta_threshold=m)


def test_strategy_rejects_non_finite_ratio_threshold():
    with pytest.raises(ConfigurationError):
        make_cfg(ratio_threshold=math.nan)


def test_strategy_accepts_negative_ratio_threshold():
    assert make_cfg(ratio_threshold=-0.5).ratio_threshold == -0.5


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        make_cfg(delta_threshold=0)


def test_defaults():
    config = Config()
    assert config.strategy.ratio_threshold == 0.05
    assert config.strategy.delta_threshold == 0.1
    assert config.scheduler.poll_interval_sec == 90.0
    assert config.hyperliquid.api_url == constants.MAINNET_API_URL


def test_from_dict_builds_nested_sections():
    config = Config.from_dict({
        "strategy": {"symbol": "ETH", "delta_threshold": 0.01},
        "hyperliquid": {"network": "testnet"},
        "monitoring": {"report_label": "ETH", "journal_enabled": True},
    })
    assert isinstance(config.strategy, StrategyConfig)
    assert config.strategy.symbol == "ETH"
    assert config.strategy.delta_threshold == 0.01
    assert config.hyperliquid.api_url == constants.TESTNET_API_URL
    assert config.monitoring.report_label == "ETH"
    assert config.monitoring.journal_enabled is True


def test_from_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "strategy:\n"
        "  symbol: BNB\n"
        "  ratio_threshold: 0.1\n"
        "scheduler:\n"
        "  poll_interval_sec: 30\n"
    )
    config = Config.from_yaml(str(path))
    assert config.strategy.ratio_threshold == 0.1
    assert config.scheduler.poll_interval_sec == 30


def test_from_yaml_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert Config.from_yaml(str(path)).strategy.delta_threshold == 0.1


def test_env_overrides_file_values(monkeypatch):
    monkeypatch.setenv("LPH_SYMBOL", "BTC")
    monkeypatch.setenv("LPH_DELTA_THRESHOLD", "0.5")
    monkeypatch.setenv("LPH_RPC_URL", "http://localhost:8545")
    monkeypatch.setenv("HL_NETWORK", "testnet")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = Config.from_dict({"strategy": {"symbol": "BNB"}})
    assert config.strategy.symbol == "BTC"
    assert config.strategy.delta_threshold == 0.5
    assert config.chain.rpc_url == "http://localhost:8545"
    assert config.hyperliquid.api_url == constants.TESTNET_API_URL
    assert config.monitoring.log_level == "DEBUG"


def test_env_threshold_is_validated(monkeypatch):
    monkeypatch.setenv("LPH_DELTA_THRESHOLD", "0")
    with pytest.raises(ConfigurationError):
        Config()


def test_validate_reports_missing_fields():
    errors = Config().validate()
    joined = "\n".join(errors)
    assert "strategy.owner_address" in joined
    assert "strategy.symbol" in joined
    assert "HL_ADDRESS" in joined
    assert "HL_SECRET_KEY" in joined


def _complete(**strategy):
    data = {
        "owner_address": OWNER,
        "position_manager_address": "0x7b8A01B39D58278b5DE7e48c8449c9f4F5170613",
        "base_token_address": BASE,
        "usdt_token_address": USDT,
        "symbol": "BNB",
    }
    data.update(strategy)
    return Config.from_dict({"strategy": data, "hyperliquid": {"address": OWNER}})


def test_validate_dry_run_does_not_need_secret_key():
    config = _complete()
    assert config.validate(dry_run=True) == []
    assert config.validate() == ["HL_SECRET_KEY environment variable required"]


def test_validate_rejects_identical_tokens():
    errors = _complete(usdt_token_address=BASE.lower()).validate(dry_run=True)
    assert any("must differ" in e for e in errors)


def test_validate_rejects_malformed_addresses():
    errors = _complete(owner_address="0x1234", base_token_address="not-an-address").validate(dry_run=True)
    assert any(e.startswith("strategy.owner_address is not a valid hex address") for e in errors)
    assert any(e.startswith("strategy.base_token_address is not a valid hex address") for e in errors)
    assert not any("usdt_token_address" in e for e in errors)


def test_validate_accepts_any_address_casing():
    config = _complete(owner_address=OWNER.lower(), usdt_token_address=USDT.upper().replace("0X", "0x"))
    assert config.validate(dry_run=True) == []
