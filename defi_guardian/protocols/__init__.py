"""Lending protocol adapters."""
from .obligations import ObligationAdapter

__all__ = ["ObligationAdapter"]
