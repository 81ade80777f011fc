"""Policy — compute LTV and health factor, classify liquidation risk."""
from __future__ import annotations

import math

from .config import ThresholdsConfig
from .models import ClassifiedPosition, Position, RiskLevel

_DEFAULT_THRESHOLDS = ThresholdsConfig()


def evaluate(
    positions: list[Position],
    thresholds: ThresholdsConfig = _DEFAULT_THRESHOLDS,
) -> list[ClassifiedPosition]:
    """Classify each position, preserving input order."""
    classified: list[ClassifiedPosition] = []
    for pos in positions:
        ltv = calculate_ltv(pos)
        health_factor = calculate_health_factor(pos)
        classified.append(
            ClassifiedPosition(
                protocol=pos.protocol,
                market=pos.market,
                ltv=ltv,
                health_factor=health_factor,
                risk_level=classify_risk(ltv, health_factor, thresholds),
                collateral_value=pos.collateral_value,
                borrow_value=pos.borrow_value,
            )
        )
    return classified


def calculate_ltv(position: Position) -> float:
    """LTV = borrow / collateral; 0 when there is no collateral."""
    if position.collateral_value == 0:
        return 0.0
    return position.borrow_value / position.collateral_value


def calculate_health_factor(position: Position) -> float:
    """Health factor = collateral / borrow; +inf when there is no debt."""
    if position.borrow_value == 0:
        return math.inf
    return position.collateral_value / position.borrow_value


def classify_risk(
    ltv: float,
    health_factor: float,
    thresholds: ThresholdsConfig = _DEFAULT_THRESHOLDS,
) -> RiskLevel:
    if ltv >= thresholds.critical_ltv or health_factor <= thresholds.min_health_factor:
        return RiskLevel.CRITICAL
    if ltv >= thresholds.warning_ltv:
        return RiskLevel.WARNING
    return RiskLevel.SAFE
