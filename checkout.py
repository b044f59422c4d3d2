from typing import Any, Dict, List

import structlog
from fastapi.concurrency import run_in_threadpool

import orders
import pricing
import settings
from database import MAX_DOCUMENT_ID
from errors import ValidationError
from realtime import ORDERS_NEW, Hub, publish
from schemas import CartItem, CheckoutRequest

logger = structlog.get_logger(__name__)


def _required(value: Any, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError("Missing required order information.", details={"field": field})
    return str(value).strip()


def _product_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(value)
        value = int(value)
    elif isinstance(value, str):
        if not value.strip().isdigit():
            raise ValueError(value)
        value = int(value.strip())
    elif not isinstance(value, int):
        raise TypeError(value)
    if not 0 <= value <= MAX_DOCUMENT_ID:
        raise ValueError(value)
    return value


def _requested_lines(items: List[CartItem]) -> List[Dict[str, Any]]:
    lines = []
    for index, item in enumerate(items):
        try:
            product_id = _product_id(item.id)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid product id at item {index}.", details={"item": index})
        qty = pricing.clamp_quantity(item.qty)
        if qty > settings.MAX_LINE_QUANTITY:
            raise ValidationError(f"Quantity too large at item {index}.", details={"item": index})
        lines.append({"id": product_id, "qty": qty})
    return lines


async def place_order(database, request: CheckoutRequest, hub: Hub) -> Dict[str, Any]:
    """Price the cart against the catalog, persist a pending order and announce it.

    Raises ValidationError before anything is written when customer fields or
    items are missing. Storage errors propagate before any broadcast; a failed
    broadcast is logged and the order is still returned.
    """
    customer_name = _required(request.customer_name, "customerName")
    customer_address = _required(request.customer_address, "customerAddress")
    customer_phone = _required(request.customer_phone, "customerPhone")
    if not request.items:
        raise ValidationError("No items in order.", details={"field": "items"})

    requested = _requested_lines(request.items)
    catalog = await run_in_threadpool(pricing.fetch_catalog, database, [line["id"] for line in requested])
    cart = pricing.resolve_line_items(requested, catalog)

    missing = sorted({line["id"] for line in requested} - set(catalog))
    if missing:
        logger.warning("checkout_unknown_products", product_ids=missing)

    order = await run_in_threadpool(
        orders.insert_order,
        database,
        customer_name=customer_name,
        customer_address=customer_address,
        customer_phone=customer_phone,
        cart=cart,
    )
    logger.info("order_created", order_id=order["id"], total=order["total"], lines=len(order["items"]))

    await publish(hub, ORDERS_NEW, order)
    return order
