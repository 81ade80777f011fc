"""Mock positions for demonstration when no real positions are available."""
from __future__ import annotations

from .models import Position, TokenAmount

SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


def mock_positions() -> list[Position]:
    """One healthy, one near-threshold and one critical position."""
    return [
        Position(
            protocol="Kamino",
            market="SOL-USDC",
            collateral_value=1000.0,
            borrow_value=450.0,
            deposits=(TokenAmount(SOL_MINT, 10),),
            borrows=(TokenAmount(USDC_MINT, 450),),
        ),
        Position(
            protocol="Marginfi",
            market="main",
            collateral_value=500.0,
            borrow_value=390.0,
            deposits=(TokenAmount(SOL_MINT, 5),),
            borrows=(TokenAmount(USDC_MINT, 390),),
        ),
        Position(
            protocol="Solend",
            market="main",
            collateral_value=300.0,
            borrow_value=275.0,
            deposits=(TokenAmount(SOL_MINT, 3),),
            borrows=(TokenAmount(USDC_MINT, 275),),
        ),
    ]
