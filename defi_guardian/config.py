"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ThresholdsConfig:
    warning_ltv: float = 0.75
    critical_ltv: float = 0.90
    min_health_factor: float = 1.10


@dataclass(frozen=True)
class MitigationConfig:
    target_health_factor: float = 1.5
    min_repay_usd: float = 10.0


@dataclass(frozen=True)
class GuardianConfig:
    loop_interval_seconds: float = 60.0
    use_mock: bool = False
    thresholds: ThresholdsConfig = field(default_factory=ThresholdsConfig)
    mitigation: MitigationConfig = field(default_factory=MitigationConfig)


@dataclass(frozen=True)
class WalletConfig:
    address: str = ""


@dataclass(frozen=True)
class SolanaConfig:
    rpc_endpoints: tuple[str, ...] = (DEFAULT_RPC_URL,)
    rpc_timeout: int = 30
    commitment: str = "confirmed"


@dataclass(frozen=True)
class ProtocolConfig:
    program_id: str = ""
    owner_offset: int = 0
    market: str = "main"


# Owner offsets point at the wallet pubkey inside each program's obligation
# (or margin account) layout.
DEFAULT_PROTOCOLS: dict[str, ProtocolConfig] = {
    "kamino": ProtocolConfig(
        program_id="KLend2g3cP87fffoy8q1mQqGKjrxjC8boSyAYavgmjD",
        owner_offset=64,
        market="main",
    ),
    "marginfi": ProtocolConfig(
        program_id="MFv2hWf31Z9kbCa1snEPYctwafyhdvnV7FZnsebVacA",
        owner_offset=40,
        market="main",
    ),
    "solend": ProtocolConfig(
        program_id="So1endDq2YkqhipRh3WViPa8hdiSpxWy6z3Z6tMCpAo",
        owner_offset=42,
        market="main",
    ),
}


@dataclass(frozen=True)
class TelegramConfig:
    enabled: bool = False
    alert_bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class NotificationsConfig:
    telegram: TelegramConfig = field(default_factory=TelegramConfig)


@dataclass(frozen=True)
class AppConfig:
    guardian: GuardianConfig = field(default_factory=GuardianConfig)
    wallet: WalletConfig = field(default_factory=WalletConfig)
    solana: SolanaConfig = field(default_factory=SolanaConfig)
    protocols: dict[str, ProtocolConfig] = field(
        default_factory=lambda: dict(DEFAULT_PROTOCOLS)
    )
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_thresholds(raw: dict[str, Any]) -> ThresholdsConfig:
    return ThresholdsConfig(
        warning_ltv=float(raw.get("warning_ltv", 0.75)),
        critical_ltv=float(raw.get("critical_ltv", 0.90)),
        min_health_factor=float(raw.get("min_health_factor", 1.10)),
    )


def _build_mitigation(raw: dict[str, Any]) -> MitigationConfig:
    return MitigationConfig(
        target_health_factor=float(raw.get("target_health_factor", 1.5)),
        min_repay_usd=float(raw.get("min_repay_usd", 10.0)),
    )


def _build_guardian(raw: dict[str, Any]) -> GuardianConfig:
    return GuardianConfig(
        loop_interval_seconds=float(raw.get("loop_interval_seconds", 60.0)),
        use_mock=_as_bool(raw.get("use_mock", False)),
        thresholds=_build_thresholds(raw.get("thresholds") or {}),
        mitigation=_build_mitigation(raw.get("mitigation") or {}),
    )


def _build_solana(raw: dict[str, Any]) -> SolanaConfig:
    endpoints = tuple(
        e for e in raw.get("rpc_endpoints", [DEFAULT_RPC_URL]) or [] if e
    )
    return SolanaConfig(
        rpc_endpoints=endpoints,
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
        commitment=raw.get("commitment", "confirmed"),
    )


def _build_protocols(raw: dict[str, Any] | None) -> dict[str, ProtocolConfig]:
    if raw is None:
        return dict(DEFAULT_PROTOCOLS)

    protocols: dict[str, ProtocolConfig] = {}
    for name, cfg in raw.items():
        cfg = cfg or {}
        default = DEFAULT_PROTOCOLS.get(name, ProtocolConfig())
        protocols[name] = ProtocolConfig(
            program_id=cfg.get("program_id", default.program_id),
            owner_offset=int(cfg.get("owner_offset", default.owner_offset)),
            market=cfg.get("market", default.market),
        )
    return protocols


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    tg = raw.get("telegram") or {}
    return NotificationsConfig(
        telegram=TelegramConfig(
            enabled=_as_bool(tg.get("enabled", False)),
            alert_bot_token=tg.get("alert_bot_token", ""),
            chat_id=str(tg.get("chat_id", "")),
        ),
    )


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------


def _apply_env_overrides(cfg: AppConfig) -> AppConfig:
    """Apply DEFI_GUARDIAN_* / SOLANA_RPC_URL environment variables."""
    env = os.environ
    guardian = cfg.guardian
    thresholds = guardian.thresholds

    threshold_overrides: dict[str, float] = {}
    for var, attr in (
        ("DEFI_GUARDIAN_WARNING_LTV", "warning_ltv"),
        ("DEFI_GUARDIAN_CRITICAL_LTV", "critical_ltv"),
        ("DEFI_GUARDIAN_MIN_HEALTH_FACTOR", "min_health_factor"),
    ):
        if env.get(var):
            threshold_overrides[attr] = float(env[var])
    if threshold_overrides:
        thresholds = replace(thresholds, **threshold_overrides)

    guardian_overrides: dict[str, Any] = {"thresholds": thresholds}
    if "DEFI_GUARDIAN_USE_MOCK" in env:
        guardian_overrides["use_mock"] = env["DEFI_GUARDIAN_USE_MOCK"] == "1"
    if env.get("DEFI_GUARDIAN_LOOP_INTERVAL_MS"):
        guardian_overrides["loop_interval_seconds"] = (
            int(env["DEFI_GUARDIAN_LOOP_INTERVAL_MS"]) / 1000
        )
    cfg = replace(cfg, guardian=replace(guardian, **guardian_overrides))

    if env.get("DEFI_GUARDIAN_WALLET"):
        cfg = replace(cfg, wallet=WalletConfig(address=env["DEFI_GUARDIAN_WALLET"]))

    rpc_url = env.get("SOLANA_RPC_URL")
    if rpc_url:
        endpoints = (rpc_url,) + tuple(
            e for e in cfg.solana.rpc_endpoints if e != rpc_url
        )
        cfg = replace(cfg, solana=replace(cfg.solana, rpc_endpoints=endpoints))

    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file). The default file is
            optional; an explicitly given path must exist.
    """
    load_dotenv()

    if config_path is None:
        path = Path(__file__).resolve().parent.parent / "config.yaml"
        required = False
    else:
        path = Path(config_path)
        required = True

    raw: dict[str, Any] = {}
    if path.exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        raw = _interpolate_env(raw)
    elif required:
        raise FileNotFoundError(f"Config file not found: {path}")

    cfg = AppConfig(
        guardian=_build_guardian(raw.get("guardian") or {}),
        wallet=WalletConfig(address=(raw.get("wallet") or {}).get("address", "")),
        solana=_build_solana(raw.get("solana") or {}),
        protocols=_build_protocols(raw.get("protocols")),
        notifications=_build_notifications(raw.get("notifications") or {}),
    )
    cfg = _apply_env_overrides(cfg)

    _validate(cfg)
    if path.exists():
        logger.info("Configuration loaded from %s", path)
    else:
        logger.info("No config file at %s, using defaults and environment", path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    t = cfg.guardian.thresholds
    for name in ("warning_ltv", "critical_ltv", "min_health_factor"):
        if getattr(t, name) <= 0:
            raise ValueError(f"Threshold '{name}' must be positive")
    if t.warning_ltv > t.critical_ltv:
        raise ValueError("warning_ltv must not exceed critical_ltv")

    m = cfg.guardian.mitigation
    if m.target_health_factor <= 1:
        raise ValueError("target_health_factor must be greater than 1")
    if m.min_repay_usd < 0:
        raise ValueError("min_repay_usd must not be negative")

    if cfg.guardian.loop_interval_seconds <= 0:
        raise ValueError("loop_interval_seconds must be positive")

    for name, proto in cfg.protocols.items():
        if not proto.program_id:
            raise ValueError(f"Protocol '{name}' has no program_id")

    if not cfg.guardian.use_mock and not cfg.solana.rpc_endpoints:
        raise ValueError("At least one Solana RPC endpoint must be configured")
