"""
pricing.py — Pricing of Draft Orders

Pure functions only: the breakdown is derived from the line totals and never
stored on its own. Each derived amount is rounded to two places before the
grand total is summed, so the grand total always equals the sum of the
amounts shown to the guest.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from . import config
from .models import DraftLineItem, PricingBreakdown

CENTS = Decimal("0.01")


def round2(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_pricing(
        lines: Iterable[DraftLineItem],
        tax_rate: Decimal = None,
        service_rate: Decimal = None
) -> PricingBreakdown:
    """
    Computes the pricing breakdown of a set of draft lines.

    Args:
        lines (Iterable[DraftLineItem]): Lines of the draft.
        tax_rate (Decimal, optional): Defaults to config.TAX_RATE.
        service_rate (Decimal, optional): Defaults to config.SERVICE_CHARGE_RATE.

    Returns:
        PricingBreakdown: subtotal, tax, service charge and grand total.
    """
    tax_rate = config.TAX_RATE if tax_rate is None else Decimal(tax_rate)
    service_rate = config.SERVICE_CHARGE_RATE if service_rate is None else Decimal(service_rate)

    subtotal = round2(sum((line.total_price for line in lines), Decimal("0")))
    tax_amount = round2(subtotal * tax_rate)
    service_charge_amount = round2(subtotal * service_rate)

    return PricingBreakdown(
        subtotal=subtotal,
        tax_amount=tax_amount,
        service_charge_amount=service_charge_amount,
        grand_total=subtotal + tax_amount + service_charge_amount,
    )
