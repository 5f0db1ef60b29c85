"""Message stylers."""

from rare_sniper.notifications.stylers.rare_item_styler import RareItemStyler

__all__ = ["RareItemStyler"]
