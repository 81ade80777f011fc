"""Solana JSON-RPC client with fallback support."""
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ...config import SolanaConfig

logger = logging.getLogger(__name__)


class SolanaClient:
    """Solana RPC client with automatic endpoint fallback."""

    def __init__(self, config: SolanaConfig) -> None:
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.commitment = config.commitment
        self.current_rpc_index = 0

    @property
    def current_endpoint(self) -> str:
        return self.endpoints[self.current_rpc_index] if self.endpoints else ""

    async def rpc_call(self, method: str, params: list[Any]) -> Any:
        """Make RPC call with fallback to alternative endpoints."""
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.post(
                        rpc_url,
                        json=payload,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        result = await response.json()
                        if "error" in result:
                            raise RuntimeError(f"RPC Error: {result['error']}")

                        if rpc_index != self.current_rpc_index:
                            logger.info("Switched to RPC endpoint: %s", rpc_url)
                            self.current_rpc_index = rpc_index

                        return result.get("result")
            except Exception as e:
                last_error = e
                logger.warning("RPC endpoint %s failed: %s", rpc_url, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

        raise RuntimeError(f"All RPC endpoints failed. Last error: {last_error}")

    async def get_version(self) -> dict[str, Any]:
        """Return the node's version info, e.g. ``{"solana-core": "1.18.22"}``."""
        return await self.rpc_call("getVersion", []) or {}

    async def get_program_accounts(
        self,
        program_id: str,
        owner: str,
        owner_offset: int,
    ) -> list[dict[str, Any]]:
        """List program accounts whose owner field matches ``owner``.

        Only account addresses are needed, so the data slice is empty.
        """
        try:
            result = await self.rpc_call(
                "getProgramAccounts",
                [
                    program_id,
                    {
                        "encoding": "base64",
                        "commitment": self.commitment,
                        "dataSlice": {"offset": 0, "length": 0},
                        "filters": [
                            {"memcmp": {"offset": owner_offset, "bytes": owner}}
                        ],
                    },
                ],
            )
            return result or []
        except Exception as e:
            logger.error("Error fetching program accounts for %s: %s", program_id, e)
            return []
