"""Unit tests for config loading, env interpolation, overrides and validation."""
from __future__ import annotations

from pathlib import Path

import pytest

from defi_guardian.config import (
    DEFAULT_RPC_URL,
    AppConfig,
    MitigationConfig,
    SolanaConfig,
    ThresholdsConfig,
    _interpolate_env,
    load_config,
)


def _write(tmp_path: Path, content: str) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(content)
    return cfg_file


class TestInterpolateEnv:
    def test_simple_substitution(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_VAR", "hello")
        assert _interpolate_env("${MY_VAR}") == "hello"

    def test_missing_var_becomes_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NONEXISTENT_VAR_XYZ", raising=False)
        assert _interpolate_env("${NONEXISTENT_VAR_XYZ}") == ""

    def test_nested(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOK", "secret")
        result = _interpolate_env({"key": ["${TOK}", "plain"], "n": 3})
        assert result == {"key": ["secret", "plain"], "n": 3}


class TestLoadConfig:
    def test_loads_valid_yaml(self, sample_yaml_path: Path) -> None:
        cfg = load_config(sample_yaml_path)
        assert isinstance(cfg, AppConfig)
        assert cfg.guardian.use_mock is True
        assert cfg.guardian.loop_interval_seconds == 30
        assert cfg.guardian.thresholds == ThresholdsConfig(0.70, 0.85, 1.2)
        assert cfg.guardian.mitigation == MitigationConfig(1.6, 5.0)
        assert cfg.wallet.address == "WALLET123"
        assert cfg.solana.rpc_timeout == 10
        assert cfg.notifications.telegram.chat_id == "999"

    def test_protocol_defaults_fill_missing_fields(self, sample_yaml_path: Path) -> None:
        cfg = load_config(sample_yaml_path)
        assert set(cfg.protocols) == {"kamino", "solend"}
        assert cfg.protocols["solend"].owner_offset == 42
        assert cfg.protocols["kamino"].market == "main"

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        cfg = load_config(_write(tmp_path, ""))
        assert cfg.guardian.thresholds == ThresholdsConfig()
        assert cfg.guardian.mitigation.target_health_factor == 1.5
        assert cfg.guardian.mitigation.min_repay_usd == 10
        assert cfg.solana.rpc_endpoints == (DEFAULT_RPC_URL,)
        assert set(cfg.protocols) == {"kamino", "marginfi", "solend"}

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.yaml")

    def test_env_interpolation_in_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TEST_WALLET", "So1Wallet")
        cfg = load_config(_write(tmp_path, 'wallet:\n  address: "${TEST_WALLET}"\n'))
        assert cfg.wallet.address == "So1Wallet"


class TestEnvOverrides:
    def test_threshold_overrides(
        self, sample_yaml_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DEFI_GUARDIAN_WARNING_LTV", "0.6")
        monkeypatch.setenv("DEFI_GUARDIAN_CRITICAL_LTV", "0.8")
        monkeypatch.setenv("DEFI_GUARDIAN_MIN_HEALTH_FACTOR", "1.3")
        cfg = load_config(sample_yaml_path)
        assert cfg.guardian.thresholds == ThresholdsConfig(0.6, 0.8, 1.3)

    def test_mock_wallet_and_interval(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DEFI_GUARDIAN_USE_MOCK", "1")
        monkeypatch.setenv("DEFI_GUARDIAN_WALLET", "EnvWallet")
        monkeypatch.setenv("DEFI_GUARDIAN_LOOP_INTERVAL_MS", "15000")
        cfg = load_config(_write(tmp_path, ""))
        assert cfg.guardian.use_mock is True
        assert cfg.wallet.address == "EnvWallet"
        assert cfg.guardian.loop_interval_seconds == 15

    def test_use_mock_requires_exact_one(
        self, sample_yaml_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DEFI_GUARDIAN_USE_MOCK", "0")
        assert load_config(sample_yaml_path).guardian.use_mock is False

    def test_rpc_url_is_tried_first(
        self, sample_yaml_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SOLANA_RPC_URL", "https://private.example.com")
        cfg = load_config(sample_yaml_path)
        assert cfg.solana.rpc_endpoints == (
            "https://private.example.com",
            "https://rpc.example.com",
        )


class TestValidation:
    @pytest.mark.parametrize(
        "content, match",
        [
            (
                "guardian:\n  thresholds:\n    warning_ltv: 0.95\n    critical_ltv: 0.9\n",
                "must not exceed",
            ),
            ("guardian:\n  thresholds:\n    min_health_factor: 0\n", "must be positive"),
            ("guardian:\n  mitigation:\n    target_health_factor: 1.0\n", "greater than 1"),
            ("guardian:\n  mitigation:\n    min_repay_usd: -1\n", "must not be negative"),
            ("guardian:\n  loop_interval_seconds: 0\n", "loop_interval_seconds"),
            ("protocols:\n  kamino:\n    program_id: ''\n", "no program_id"),
            ("solana:\n  rpc_endpoints: []\n", "RPC endpoint"),
        ],
    )
    def test_invalid_config_raises(self, tmp_path: Path, content: str, match: str) -> None:
        with pytest.raises(ValueError, match=match):
            load_config(_write(tmp_path, content))

    def test_no_endpoints_allowed_in_mock_mode(self, tmp_path: Path) -> None:
        cfg = load_config(
            _write(tmp_path, "guardian:\n  use_mock: true\nsolana:\n  rpc_endpoints: []\n")
        )
        assert cfg.solana.rpc_endpoints == ()

    def test_null_endpoint_list_raises_value_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="RPC endpoint"):
            load_config(
                _write(tmp_path, "guardian:\n  use_mock: false\nsolana:\n  rpc_endpoints:\n")
            )

    def test_null_endpoint_list_allowed_in_mock_mode(self, tmp_path: Path) -> None:
        cfg = load_config(
            _write(tmp_path, "guardian:\n  use_mock: true\nsolana:\n  rpc_endpoints:\n")
        )
        assert cfg.solana.rpc_endpoints == ()


class TestFrozenConfigs:
    def test_thresholds_immutable(self) -> None:
        t = ThresholdsConfig()
        with pytest.raises(AttributeError):
            t.warning_ltv = 0.5  # type: ignore[misc]

    def test_solana_config_immutable(self) -> None:
        c = SolanaConfig()
        with pytest.raises(AttributeError):
            c.rpc_timeout = 999  # type: ignore[misc]
