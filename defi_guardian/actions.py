"""Actions — decide mitigations for classified positions."""
from __future__ import annotations

from .config import MitigationConfig
from .models import (
    ClassifiedPosition,
    KnownValues,
    LtvOnly,
    MitigationAction,
    MitigationDecision,
    RiskLevel,
)

_DEFAULT_MITIGATION = MitigationConfig()

MONITOR_DESCRIPTION = "close to threshold"

# Assumed position size (USD) when only LTV is known. Rough, not derived
# from the target health factor.
FALLBACK_POSITION_SIZE_USD = 500.0


def decide_mitigations(
    classified: list[ClassifiedPosition],
    mitigation: MitigationConfig = _DEFAULT_MITIGATION,
) -> list[MitigationDecision]:
    """Decide one mitigation per position, preserving input order."""
    return [decide_mitigation(pos, mitigation) for pos in classified]


def decide_mitigation(
    position: ClassifiedPosition,
    mitigation: MitigationConfig = _DEFAULT_MITIGATION,
) -> MitigationDecision:
    if position.risk_level == RiskLevel.SAFE:
        return MitigationDecision(
            protocol=position.protocol,
            market=position.market,
            action=MitigationAction.NONE,
        )

    if position.risk_level == RiskLevel.WARNING:
        return MitigationDecision(
            protocol=position.protocol,
            market=position.market,
            action=MitigationAction.MONITOR,
            amount_description=MONITOR_DESCRIPTION,
        )

    repay = calculate_repay_amount(position, mitigation)
    return MitigationDecision(
        protocol=position.protocol,
        market=position.market,
        action=MitigationAction.SIMULATE_REPAY,
        amount_description=f"{repay:.2f} USDC",
    )


def calculate_repay_amount(
    position: ClassifiedPosition,
    mitigation: MitigationConfig = _DEFAULT_MITIGATION,
) -> float:
    """USD amount to repay so the position returns to the target health factor.

    With both USD legs known, solve ``target_hf = collateral / (borrow - repay)``
    for ``repay``, clamped to ``[0, borrow]``. Otherwise fall back to a
    size-agnostic estimate from the excess LTV. Both paths apply the
    minimum repay floor.
    """
    basis = position.repay_basis
    if isinstance(basis, KnownValues):
        return _exact_repay(basis, mitigation)
    return _estimated_repay(basis, mitigation)


def _exact_repay(basis: KnownValues, mitigation: MitigationConfig) -> float:
    target_borrow = basis.collateral_value / mitigation.target_health_factor
    repay = basis.borrow_value - target_borrow
    repay = min(max(repay, 0.0), basis.borrow_value)
    return max(repay, mitigation.min_repay_usd)


def _estimated_repay(basis: LtvOnly, mitigation: MitigationConfig) -> float:
    target_ltv = 1 / mitigation.target_health_factor
    if basis.ltv <= target_ltv:
        return 0.0
    excess_ltv = basis.ltv - target_ltv
    return max(excess_ltv * FALLBACK_POSITION_SIZE_USD, mitigation.min_repay_usd)
