"""Simulator — build inert Solana transactions for mitigations.

Transactions are well-formed but never signed or sent.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

from .models import ClassifiedPosition, MitigationAction, MitigationDecision

logger = logging.getLogger(__name__)

PLACEHOLDER_PUBKEY = Pubkey.from_string("11111111111111111111111111111111")


@dataclass(frozen=True)
class SimulatedTransaction:
    protocol: str
    market: str
    action: MitigationAction
    transaction: Transaction
    description: str


def simulate_actions(
    classified: list[ClassifiedPosition],
    decisions: list[MitigationDecision],
) -> list[SimulatedTransaction]:
    """Log every decision and build a transaction for each repay.

    ``classified[i]`` and ``decisions[i]`` describe the same position.
    """
    simulated: list[SimulatedTransaction] = []

    for position, decision in zip(classified, decisions):
        if decision.action != MitigationAction.SIMULATE_REPAY:
            _log_simulation(position, decision)
            continue

        tx = build_repay_transaction(decision)
        simulated.append(tx)
        _log_simulation(position, decision, tx)

    return simulated


def build_repay_transaction(decision: MitigationDecision) -> SimulatedTransaction:
    """Wrap a zero-lamport placeholder transfer in an unsigned transaction."""
    ix = transfer(
        TransferParams(
            from_pubkey=PLACEHOLDER_PUBKEY,
            to_pubkey=PLACEHOLDER_PUBKEY,
            lamports=0,
        )
    )
    tx = Transaction.new_unsigned(Message([ix], PLACEHOLDER_PUBKEY))

    amount = decision.amount_description or "debt"
    return SimulatedTransaction(
        protocol=decision.protocol,
        market=decision.market,
        action=decision.action,
        transaction=tx,
        description=f"Repay {amount} on {decision.protocol} {decision.market}",
    )


def _log_simulation(
    position: ClassifiedPosition,
    decision: MitigationDecision,
    tx: SimulatedTransaction | None = None,
) -> None:
    action_text = decision.action.value
    if decision.amount_description:
        action_text += f" [Amount: {decision.amount_description}]"
    if tx is not None:
        action_text += " (no on-chain execution)"

    logger.info(
        "[SIMULATION] Protocol: %-10s Market: %-12s LTV: %6.2f%%  HF: %6.2f  "
        "Risk: %-8s  Action: %s",
        position.protocol,
        position.market,
        position.ltv * 100,
        position.health_factor,
        position.risk_level.value,
        action_text,
    )
