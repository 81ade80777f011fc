"""DeFi risk guardian: liquidation-risk monitor for Solana lending positions."""
from .actions import calculate_repay_amount, decide_mitigations
from .models import (
    ClassifiedPosition,
    MitigationAction,
    MitigationDecision,
    Position,
    RiskLevel,
)
from .policy import evaluate

__all__ = [
    "ClassifiedPosition",
    "MitigationAction",
    "MitigationDecision",
    "Position",
    "RiskLevel",
    "calculate_repay_amount",
    "decide_mitigations",
    "evaluate",
]

__version__ = "0.1.0"
