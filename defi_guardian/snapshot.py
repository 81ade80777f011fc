"""Demo snapshot — screenshot-friendly summary of every protocol's positions."""
from __future__ import annotations

import math

from .models import ClassifiedPosition, MitigationAction, MitigationDecision

PROTOCOL_ORDER = ("Kamino", "Marginfi", "Solend")

_WIDTH = 52
_BORDER = "═" * _WIDTH


def _ratio_text(value: float) -> str:
    # No debt gives an infinite health factor.
    if math.isinf(value):
        return "Infinity"
    return f"{value:.2f}"


def _action_text(decision: MitigationDecision | None) -> str:
    if decision is None or decision.action == MitigationAction.NONE:
        return "None"
    if decision.amount_description:
        return f"{decision.action.value}: {decision.amount_description}"
    return decision.action.value


def _position_block(
    protocol: str,
    positions: list[ClassifiedPosition],
    decisions: list[MitigationDecision],
) -> list[str]:
    if not positions:
        return [f"  {protocol}", "    (no positions)"]

    lines: list[str] = []
    for pos in positions:
        decision = next(
            (
                d
                for d in decisions
                if d.protocol == pos.protocol and d.market == pos.market
            ),
            None,
        )
        lines.append(f"  {protocol}  |  {pos.market}")
        hf = _ratio_text(pos.health_factor)
        lines.append(f"    LTV: {pos.ltv * 100:.2f}%   Health Factor: {hf}")
        lines.append(f"    Risk level: {pos.risk_level.value}")
        lines.append(f"    Simulated mitigation action: {_action_text(decision)}")
        lines.append("")
    return lines


def format_demo_snapshot(
    classified: list[ClassifiedPosition],
    decisions: list[MitigationDecision],
) -> str:
    """Build the snapshot text for Kamino, Marginfi and Solend."""
    lines = ["", _BORDER, "  DEMO SNAPSHOT (first iteration)", _BORDER, ""]
    for protocol in PROTOCOL_ORDER:
        positions = [p for p in classified if p.protocol.lower() == protocol.lower()]
        lines.extend(_position_block(protocol, positions, decisions))
    lines.append(_BORDER)
    lines.append("")
    return "\n".join(lines)
