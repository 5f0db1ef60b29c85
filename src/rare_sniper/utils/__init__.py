# -*- coding: utf-8 -*-
"""Utility modules."""

from rare_sniper.utils.formatting import format_elapsed, format_price_sol, mask_address

__all__ = ["format_elapsed", "format_price_sol", "mask_address"]
