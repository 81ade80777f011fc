"""Agent loop — perceive, classify, decide, simulate, alert."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from ..actions import decide_mitigations
from ..config import AppConfig
from ..interfaces.notifier import Notifier
from ..models import (
    ClassifiedPosition,
    MitigationAction,
    MitigationDecision,
    Position,
)
from ..notifications import TelegramNotifier
from ..policy import evaluate
from ..simulator import SimulatedTransaction, simulate_actions
from ..snapshot import format_demo_snapshot
from .perception import Perception

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IterationResult:
    positions: list[Position]
    classified: list[ClassifiedPosition]
    decisions: list[MitigationDecision]
    simulated: list[SimulatedTransaction]


class Guardian:
    """Runs monitoring iterations over the configured wallet's positions.

    The demo snapshot is logged on the first iteration only; that state
    belongs to this instance.
    """

    def __init__(self, config: AppConfig, perception: Perception | None = None) -> None:
        self._config = config
        self._thresholds = config.guardian.thresholds
        self._mitigation = config.guardian.mitigation
        self._perception = perception or Perception(config)

        self._notifiers: list[Notifier] = []
        if config.notifications.telegram.enabled:
            self._notifiers.append(TelegramNotifier(config.notifications.telegram))

        self._snapshot_logged = False
        self.iteration_count = 0

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _format_wallet(address: str) -> str:
        if len(address) > 16:
            return f"{address[:10]}...{address[-6:]}"
        return address

    @staticmethod
    def _now_str() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

    def _build_critical_alert(
        self, position: ClassifiedPosition, decision: MitigationDecision
    ) -> str:
        lines = [
            f"🚨 CRITICAL · LTV {position.ltv * 100:.2f}%",
            "",
            f"{position.protocol} · {position.market}",
            "",
        ]
        if position.collateral_value is not None:
            lines.append(f"Collateral: ${position.collateral_value:,.2f}")
        if position.borrow_value is not None:
            lines.append(f"Borrowed: ${position.borrow_value:,.2f}")
        suggestion = decision.action.value
        if decision.amount_description:
            suggestion += f" {decision.amount_description}"
        lines += [
            f"Health Factor: {position.health_factor:.2f}",
            "",
            f"Suggested: {suggestion} (simulated, not executed)",
        ]
        wallet = self._config.wallet.address
        if wallet:
            lines += ["", f"Wallet: {self._format_wallet(wallet)}"]
        lines.append(f"{self._now_str()} UTC")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Notification dispatch
    # ------------------------------------------------------------------

    async def _send_alert(self, message: str, subject: str = "") -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_alert(message, subject=subject)
            except Exception as e:
                logger.error("Notifier send_alert failed: %s", e)

    # ------------------------------------------------------------------
    # Core workflows
    # ------------------------------------------------------------------

    async def assess(
        self,
    ) -> tuple[list[Position], list[ClassifiedPosition], list[MitigationDecision]]:
        """Perceive positions and run them through policy and actions."""
        positions = await self._perception.perceive()
        classified = evaluate(positions, self._thresholds)
        decisions = decide_mitigations(classified, self._mitigation)
        return positions, classified, decisions

    async def snapshot(self) -> str:
        """Return the demo snapshot for the current positions."""
        _, classified, decisions = await self.assess()
        return format_demo_snapshot(classified, decisions)

    async def run_iteration(self) -> IterationResult:
        """Run one monitoring iteration."""
        self.iteration_count += 1
        positions, classified, decisions = await self.assess()

        if not self._snapshot_logged:
            logger.info("%s", format_demo_snapshot(classified, decisions))
            self._snapshot_logged = True

        simulated = simulate_actions(classified, decisions)

        for position, decision in zip(classified, decisions):
            if decision.action == MitigationAction.SIMULATE_REPAY:
                await self._send_alert(
                    self._build_critical_alert(position, decision),
                    subject="🚨 CRITICAL: Liquidation Risk!",
                )

        return IterationResult(positions, classified, decisions, simulated)

    async def check_rpc(self) -> bool:
        """Verify RPC connectivity and list the programs that would be queried."""
        client = self._perception.chain_client
        endpoint = getattr(client, "current_endpoint", "")
        logger.info("Connecting to: %s", endpoint)

        try:
            version = await client.get_version()
        except Exception as e:
            logger.error("RPC check failed: %s", e)
            return False

        logger.info(
            "Connected to Solana cluster, version %s", version.get("solana-core", "?")
        )

        if not self._config.wallet.address:
            logger.warning("No wallet configured; positions would not be queried")
        else:
            logger.info("Wallet: %s", self._config.wallet.address)

        for name, adapter in self._perception.adapters.items():
            logger.info(
                "Would query %s (program %s)",
                adapter.protocol_name,
                self._config.protocols[name].program_id,
            )
        return True

    async def run_continuous(self, interval_seconds: float | None = None) -> None:
        """Run the monitoring loop until cancelled."""
        interval = interval_seconds or self._config.guardian.loop_interval_seconds
        logger.info("Starting DeFi Risk Guardian (checking every %ss)", interval)

        try:
            while True:
                logger.info("=" * 60)
                logger.info(
                    "Iteration #%d - %s UTC", self.iteration_count + 1, self._now_str()
                )
                logger.info("=" * 60)

                try:
                    await self.run_iteration()
                except Exception as e:
                    logger.error("Loop iteration error: %s", e)

                logger.info("Next check in %ss...", interval)
                await asyncio.sleep(interval)
        finally:
            logger.info(
                "Shutting down DeFi Risk Guardian. Total iterations: %d",
                self.iteration_count,
            )
