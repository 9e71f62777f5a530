"""Swap pricing."""

from elastic_amm.amm.pricing import (
    compute_swap_base_for_quote,
    compute_swap_quote_for_base,
    price_after_fee,
)

__all__ = [
    "price_after_fee",
    "compute_swap_quote_for_base",
    "compute_swap_base_for_quote",
]
