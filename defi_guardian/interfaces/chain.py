"""Chain client protocol — blockchain RPC abstraction."""
from typing import Any, Protocol


class ChainClient(Protocol):
    """Abstract interface for blockchain RPC interactions."""

    async def get_version(self) -> dict[str, Any]: ...

    async def get_program_accounts(
        self, program_id: str, owner: str, owner_offset: int
    ) -> list[dict[str, Any]]: ...
