"""Order ledger and status lifecycle.

Orders are written once at checkout. Afterwards only ``status`` changes;
the line-item snapshot and totals stay as they were at purchase time.

    pending -> processing -> packed -> shipped -> delivered
    (any non-terminal) -> cancelled

Admins may set any status from any other.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

import structlog

import settings
from database import create_document, doc_to_dict, get_documents, utcnow
from errors import InvalidStatus, NotFound
from pricing import PricedCart, format_amount, round_amount

logger = structlog.get_logger(__name__)

COLLECTION = "order"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    PACKED = "packed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


def parse_status(value: Optional[str]) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatus(f"Invalid status: {value!r}")


def order_to_dict(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = doc_to_dict(doc)
    out["order_date"] = out.pop("created_at", None)
    out.pop("updated_at", None)
    return out


def insert_order(
    database,
    *,
    customer_name: str,
    customer_address: str,
    customer_phone: str,
    cart: PricedCart,
    currency_symbol: Optional[str] = None,
) -> Dict[str, Any]:
    symbol = settings.CURRENCY_SYMBOL if currency_symbol is None else currency_symbol
    total = cart.total
    doc = create_document(
        database,
        COLLECTION,
        {
            "customer_name": customer_name,
            "customer_address": customer_address,
            "customer_phone": customer_phone,
            "items": [line.to_dict() for line in cart.lines],
            "total": format_amount(total, symbol),
            "total_value": float(round_amount(total)),
            "status": OrderStatus.PENDING.value,
        },
    )
    return order_to_dict(doc)


def list_orders(database) -> List[Dict[str, Any]]:
    docs = get_documents(database, COLLECTION, sort=[("_id", -1)])
    return [order_to_dict(d) for d in docs]


def get_order(database, order_id: int) -> Dict[str, Any]:
    doc = database[COLLECTION].find_one({"_id": order_id})
    if not doc:
        raise NotFound(f"Order not found: {order_id}")
    return order_to_dict(doc)


def set_status(database, order_id: int, status: Optional[str]) -> Dict[str, Any]:
    new_status = parse_status(status)
    result = database[COLLECTION].update_one(
        {"_id": order_id},
        {"$set": {"status": new_status.value, "updated_at": utcnow()}},
    )
    if result.matched_count == 0:
        raise NotFound(f"Order not found: {order_id}")
    logger.info("order_status_changed", order_id=order_id, status=new_status.value)
    return get_order(database, order_id)
