"""Formatting helpers for log lines and notifications."""

from __future__ import annotations

from rare_sniper.models.item import LAMPORTS_PER_SOL


def format_price_sol(lamports: int | None) -> str:
    """Render a lamport price as SOL, e.g. 1500000000 -> '1.5 SOL'."""
    if lamports is None:
        return "Not listed"
    return f"{lamports / LAMPORTS_PER_SOL:.9g} SOL"


def format_elapsed(seconds: float) -> str:
    """Human-readable duration: '850ms', '42s' or '3m 5s'."""
    ms = int(seconds * 1000)
    if ms < 1000:
        return f"{ms}ms"
    whole = ms // 1000
    if whole < 60:
        return f"{whole}s"
    return f"{whole // 60}m {whole % 60}s"


def mask_address(addr: str | None) -> str:
    """Shorten a base58 address for logs (e.g. 7xKX...gAsU)."""
    if not addr or len(addr) < 10:
        return addr or "***"
    return f"{addr[:4]}...{addr[-4:]}"
