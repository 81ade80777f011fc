"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from defi_guardian.config import (
    DEFAULT_PROTOCOLS,
    AppConfig,
    GuardianConfig,
    MitigationConfig,
    NotificationsConfig,
    SolanaConfig,
    TelegramConfig,
    ThresholdsConfig,
    WalletConfig,
)
from defi_guardian.models import ClassifiedPosition, Position, RiskLevel

_GUARDIAN_ENV_VARS = (
    "DEFI_GUARDIAN_WARNING_LTV",
    "DEFI_GUARDIAN_CRITICAL_LTV",
    "DEFI_GUARDIAN_MIN_HEALTH_FACTOR",
    "DEFI_GUARDIAN_USE_MOCK",
    "DEFI_GUARDIAN_WALLET",
    "DEFI_GUARDIAN_LOOP_INTERVAL_MS",
    "SOLANA_RPC_URL",
)


@pytest.fixture(autouse=True)
def _clean_guardian_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in _GUARDIAN_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_thresholds() -> ThresholdsConfig:
    return ThresholdsConfig(warning_ltv=0.75, critical_ltv=0.90, min_health_factor=1.10)


@pytest.fixture()
def sample_solana_config() -> SolanaConfig:
    return SolanaConfig(
        rpc_endpoints=("https://rpc1.example.com", "https://rpc2.example.com"),
        rpc_timeout=10,
    )


@pytest.fixture()
def sample_app_config(
    sample_thresholds: ThresholdsConfig,
    sample_solana_config: SolanaConfig,
) -> AppConfig:
    return AppConfig(
        guardian=GuardianConfig(
            loop_interval_seconds=5,
            use_mock=False,
            thresholds=sample_thresholds,
            mitigation=MitigationConfig(),
        ),
        wallet=WalletConfig(address="7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"),
        solana=sample_solana_config,
        protocols=dict(DEFAULT_PROTOCOLS),
        notifications=NotificationsConfig(
            telegram=TelegramConfig(
                enabled=True,
                alert_bot_token="fake-alert-token",
                chat_id="12345",
            ),
        ),
    )


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def safe_position() -> Position:
    return Position(
        protocol="Kamino", market="SOL-USDC", collateral_value=1000.0, borrow_value=450.0
    )


@pytest.fixture()
def warning_position() -> Position:
    return Position(
        protocol="Marginfi", market="main", collateral_value=500.0, borrow_value=390.0
    )


@pytest.fixture()
def critical_position() -> Position:
    return Position(
        protocol="Solend", market="main", collateral_value=300.0, borrow_value=275.0
    )


@pytest.fixture()
def critical_classified() -> ClassifiedPosition:
    return ClassifiedPosition(
        protocol="Solend",
        market="main",
        ltv=275 / 300,
        health_factor=300 / 275,
        risk_level=RiskLevel.CRITICAL,
        collateral_value=300.0,
        borrow_value=275.0,
    )


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    guardian:
      loop_interval_seconds: 30
      use_mock: true
      thresholds:
        warning_ltv: 0.70
        critical_ltv: 0.85
        min_health_factor: 1.2
      mitigation:
        target_health_factor: 1.6
        min_repay_usd: 5
    wallet:
      address: "WALLET123"
    solana:
      rpc_endpoints: ["https://rpc.example.com"]
      rpc_timeout: 10
    protocols:
      kamino:
        program_id: "KLend2g3cP87fffoy8q1mQqGKjrxjC8boSyAYavgmjD"
        owner_offset: 64
      solend:
        program_id: "So1endDq2YkqhipRh3WViPa8hdiSpxWy6z3Z6tMCpAo"
    notifications:
      telegram:
        enabled: true
        alert_bot_token: "tok1"
        chat_id: 999
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
