"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class RiskLevel(str, Enum):
    SAFE = "SAFE"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class MitigationAction(str, Enum):
    NONE = "none"
    MONITOR = "monitor"
    SIMULATE_REPAY = "simulate_repay"


@dataclass(frozen=True)
class TokenAmount:
    """Single token balance within a position (deposit or borrow)."""

    mint: str
    amount: float


@dataclass(frozen=True)
class Position:
    """Lending position as reported by perception, valued in USD."""

    protocol: str
    market: str
    collateral_value: float
    borrow_value: float
    deposits: tuple[TokenAmount, ...] = ()
    borrows: tuple[TokenAmount, ...] = ()


@dataclass(frozen=True)
class KnownValues:
    """Repay basis when both USD legs of the position are known."""

    collateral_value: float
    borrow_value: float


@dataclass(frozen=True)
class LtvOnly:
    """Repay basis when only the loan-to-value ratio is known."""

    ltv: float


RepayBasis = Union[KnownValues, LtvOnly]


@dataclass(frozen=True)
class ClassifiedPosition:
    """Position with derived ratios and risk level."""

    protocol: str
    market: str
    ltv: float
    health_factor: float
    risk_level: RiskLevel
    collateral_value: float | None = None
    borrow_value: float | None = None

    @property
    def repay_basis(self) -> RepayBasis:
        """Exact basis when both USD values are present and positive."""
        if (
            self.collateral_value is not None
            and self.borrow_value is not None
            and self.collateral_value > 0
            and self.borrow_value > 0
        ):
            return KnownValues(self.collateral_value, self.borrow_value)
        return LtvOnly(self.ltv)


@dataclass(frozen=True)
class MitigationDecision:
    """Suggested response to a classified position."""

    protocol: str
    market: str
    action: MitigationAction
    amount_description: str | None = None
