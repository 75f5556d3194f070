from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from loguru import logger

from ordergate.delivery.fees import InvalidInputError, quote_delivery
from ordergate.delivery.models import OUTSIDE_SERVICE_AREA
from ordergate.hours.evaluator import is_delivery_available, is_pickup_available
from ordergate.settings.models import RestaurantSettings

ORDER_TYPES = ("pickup", "delivery")


@dataclass(frozen=True)
class CheckoutDecision:
    allowed: bool
    reason: str  # ok | busy | closed | channel_closed | outside_service_area | below_minimum
    delivery_fee: float = 0.0
    minimum_order: float | None = None
    total: float | None = None


def evaluate_checkout(
    settings: RestaurantSettings,
    order_type: str,
    *,
    subtotal: float,
    distance_km: float | None = None,
    now: datetime | None = None,
    tz: str | ZoneInfo | None = None,
) -> CheckoutDecision:
    """Decide whether an order may be placed right now.

    Runs on every checkout attempt, independently of the periodic status poll.
    """
    if order_type not in ORDER_TYPES:
        raise InvalidInputError(f"Unknown order type: {order_type!r}")
    if subtotal < 0:
        raise InvalidInputError(f"Subtotal must be non-negative, got {subtotal}")
    if settings.is_busy:
        return CheckoutDecision(allowed=False, reason="busy")
    if settings.is_open_override is False:
        return CheckoutDecision(allowed=False, reason="closed")

    if order_type == "pickup":
        enabled = settings.services.has_pickup
        channel_open = enabled and is_pickup_available(settings, now, tz)
    else:
        enabled = settings.services.has_delivery
        channel_open = enabled and is_delivery_available(settings, now, tz)
    if not channel_open:
        return CheckoutDecision(allowed=False, reason="channel_closed")

    if order_type == "pickup":
        return CheckoutDecision(allowed=True, reason="ok", total=round(subtotal, 2))

    if distance_km is None:
        raise InvalidInputError("Delivery checkout requires a distance")
    quote = quote_delivery(distance_km, settings.zones)
    if quote is OUTSIDE_SERVICE_AREA:
        logger.info("Checkout rejected: {:.2f} km is outside the delivery area", distance_km)
        return CheckoutDecision(allowed=False, reason="outside_service_area")
    if quote.minimum_order is not None and subtotal < quote.minimum_order:
        return CheckoutDecision(
            allowed=False,
            reason="below_minimum",
            delivery_fee=quote.fee,
            minimum_order=quote.minimum_order,
        )
    return CheckoutDecision(
        allowed=True,
        reason="ok",
        delivery_fee=quote.fee,
        minimum_order=quote.minimum_order,
        total=round(subtotal + quote.fee, 2),
    )
