from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from virtual_curve.integration.config_loader import CONFIG_PATH_ENV, SCHEMA


Q64 = 1 << 64
LIQUIDITY = 1_000_000_000 * Q64


def _config_file(tmp_path: Path) -> Path:
    doc = {
        "schema": SCHEMA,
        "quote_mint": "quote",
        "collect_fee_mode": 0,
        "activation_type": 1,
        "migration_quote_threshold": 1_000_000_000_000,
        "sqrt_min_price": Q64,
        "sqrt_max_price": 4 * Q64,
        "fees": {"base_fee": {"cliff_fee_numerator": 10_000_000}},
    }
    path = tmp_path / "pool.yaml"
    path.write_text(yaml.safe_dump(doc), encoding="utf-8")
    return path


def _run(argv: list[str], capsys: pytest.CaptureFixture[str]) -> tuple[int, str, str]:
    from tools.quote_swap import main

    code = main(argv)
    out = capsys.readouterr()
    return code, out.out, out.err


def test_quotes_buy_base(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(
        [
            "--config", str(_config_file(tmp_path)),
            "--liquidity", str(LIQUIDITY),
            "--sqrt-price", str(2 * Q64),
            "--amount-in", "1000000",
            "--referral",
        ],
        capsys,
    )
    assert code == 0
    quote = json.loads(out)
    assert quote["total_fee"] == 10_000
    assert quote["actual_input_amount"] == 990_000
    assert (quote["protocol_fee"], quote["referral_fee"], quote["trading_fee"]) == (1_600, 400, 8_000)
    assert quote["fee_mint"] == "quote"
    assert int(quote["next_sqrt_price"]) > 2 * Q64


def test_config_from_env_and_base_supply(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv(CONFIG_PATH_ENV, str(_config_file(tmp_path)))
    code, out, _ = _run(["--base-supply", "750000000", "--amount-in", "1000"], capsys)
    assert code == 0
    assert json.loads(out)["liquidity"] == str(LIQUIDITY)


def test_rejected_quote_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, _, err = _run(
        ["--config", str(_config_file(tmp_path)), "--liquidity", str(LIQUIDITY), "--amount-in", "0"],
        capsys,
    )
    assert code == 1
    assert "ZeroAmountError" in err


def test_selling_base_at_min_price_is_rejected(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, _, err = _run(
        [
            "--config", str(_config_file(tmp_path)),
            "--liquidity", str(LIQUIDITY),
            "--amount-in", "1000",
            "--base-for-quote",
        ],
        capsys,
    )
    assert code == 1
    assert "NotEnoughLiquidityError" in err


def test_missing_config(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    code, _, err = _run(["--liquidity", str(LIQUIDITY), "--amount-in", "1"], capsys)
    assert code == 2
    assert "config not found" in err


def test_bad_pool(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, _, err = _run(
        ["--config", str(_config_file(tmp_path)), "--liquidity", "0", "--amount-in", "1"],
        capsys,
    )
    assert code == 2
    assert "invalid config or pool" in err
