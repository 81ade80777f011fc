"""Perception — gather lending positions for the configured wallet."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..chains.solana import SolanaClient
from ..config import AppConfig
from ..interfaces.chain import ChainClient
from ..interfaces.protocol_adapter import ProtocolAdapter
from ..mock import mock_positions
from ..models import Position
from ..protocols import ObligationAdapter

logger = logging.getLogger(__name__)

# Registry of protocol adapter factories keyed by protocol name.
_PROTOCOL_FACTORIES: dict[str, Any] = {
    "kamino": lambda client, cfg: ObligationAdapter("Kamino", client, cfg),
    "marginfi": lambda client, cfg: ObligationAdapter("Marginfi", client, cfg),
    "solend": lambda client, cfg: ObligationAdapter("Solend", client, cfg),
}


class Perception:
    """Fetch positions from every configured protocol, or the mock dataset."""

    def __init__(
        self, config: AppConfig, chain_client: ChainClient | None = None
    ) -> None:
        self._config = config
        self._use_mock = config.guardian.use_mock
        self._wallet = config.wallet.address
        self._client = chain_client or SolanaClient(config.solana)

        self._adapters: dict[str, ProtocolAdapter] = {}
        for proto_name, proto_cfg in config.protocols.items():
            factory = _PROTOCOL_FACTORIES.get(proto_name)
            if factory:
                self._adapters[proto_name] = factory(self._client, proto_cfg)
            else:
                logger.warning("No adapter factory for protocol '%s'", proto_name)

    @property
    def chain_client(self) -> ChainClient:
        return self._client

    @property
    def adapters(self) -> dict[str, ProtocolAdapter]:
        return self._adapters

    async def perceive(self) -> list[Position]:
        if self._use_mock:
            logger.info("Using mock positions for demo")
            return mock_positions()

        if not self._wallet:
            logger.warning("No wallet configured, returning empty positions")
            return []

        try:
            results = await asyncio.gather(
                *(
                    adapter.fetch_positions(self._wallet)
                    for adapter in self._adapters.values()
                )
            )
        except Exception as e:
            logger.error("Perception error: %s", e)
            return []

        return [position for positions in results for position in positions]
