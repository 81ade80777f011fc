"""Obligation-account adapter shared by Kamino, Marginfi and Solend."""
from __future__ import annotations

import logging

from ..config import ProtocolConfig
from ..interfaces.chain import ChainClient
from ..models import Position

logger = logging.getLogger(__name__)


class ObligationAdapter:
    """Locate a wallet's obligation accounts for one Solana lending program.

    Each program stores a borrower's state in accounts whose owner pubkey sits
    at a fixed offset, so discovery is a single ``getProgramAccounts`` call
    with a ``memcmp`` filter. Account layouts are not decoded; the adapter
    reports no positions.
    """

    def __init__(
        self, name: str, chain_client: ChainClient, config: ProtocolConfig
    ) -> None:
        self._name = name
        self._client = chain_client
        self._config = config

    @property
    def protocol_name(self) -> str:
        return self._name

    @property
    def program_id(self) -> str:
        return self._config.program_id

    async def find_obligations(self, wallet_address: str) -> list[str]:
        """Return addresses of the wallet's obligation accounts."""
        accounts = await self._client.get_program_accounts(
            self._config.program_id, wallet_address, self._config.owner_offset
        )
        return [a["pubkey"] for a in accounts if a.get("pubkey")]

    async def fetch_positions(self, wallet_address: str) -> list[Position]:
        logger.info("Fetching %s positions for wallet: %s", self._name, wallet_address)

        obligations = await self.find_obligations(wallet_address)
        if obligations:
            logger.info(
                "Found %d %s obligation account(s); decoding not supported",
                len(obligations),
                self._name,
            )
        return []
