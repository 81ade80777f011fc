"""Protocol interfaces for the DeFi risk guardian."""
from .chain import ChainClient
from .notifier import Notifier
from .protocol_adapter import ProtocolAdapter

__all__ = ["ChainClient", "Notifier", "ProtocolAdapter"]
