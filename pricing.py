"""Server-side pricing of checkout carts.

Prices always come from the catalog. Whatever price or title the client put in
its cart is ignored; only product ids and quantities are read from the request.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_CENTS = Decimal("0.01")


@dataclass
class PricedLine:
    id: int
    title: str
    qty: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.qty

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "qty": self.qty, "unit_price": float(self.unit_price)}


@dataclass
class PricedCart:
    lines: List[PricedLine] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self.lines), Decimal("0"))


def parse_price(display: Any) -> Optional[Decimal]:
    """Extract the first number from a display price such as "₹1,250.50"."""
    if display is None:
        return None
    match = _NUMBER.search(str(display).replace(",", ""))
    if not match:
        return None
    return Decimal(match.group(0))


def unit_price_for(product: Optional[Dict[str, Any]]) -> Decimal:
    if not product:
        return Decimal("0")
    stored = product.get("price_value")
    if stored is not None and stored != "":
        try:
            return Decimal(str(stored))
        except InvalidOperation:
            pass
    return parse_price(product.get("price")) or Decimal("0")


def clamp_quantity(qty: Any) -> int:
    try:
        value = int(float(qty))
    except (TypeError, ValueError, OverflowError):
        return 1
    return max(1, value)


def fetch_catalog(database, product_ids: Iterable[int]) -> Dict[int, Dict[str, Any]]:
    ids = sorted(set(product_ids))
    if not ids:
        return {}
    cursor = database["product"].find(
        {"_id": {"$in": ids}},
        {"title": 1, "price": 1, "price_value": 1},
    )
    return {doc["_id"]: doc for doc in cursor}


def resolve_line_items(requested: Iterable[Dict[str, Any]], catalog: Dict[int, Dict[str, Any]]) -> PricedCart:
    """Price requested ``{"id", "qty"}`` lines against catalog documents.

    Unknown product ids produce a zero-priced line instead of failing the
    whole cart.
    """
    cart = PricedCart()
    for item in requested:
        product_id = int(item["id"])
        product = catalog.get(product_id)
        cart.lines.append(
            PricedLine(
                id=product_id,
                title=(product or {}).get("title") or "",
                qty=clamp_quantity(item.get("qty")),
                unit_price=unit_price_for(product),
            )
        )
    return cart


def round_amount(amount: Decimal) -> Decimal:
    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal, symbol: str) -> str:
    return f"{symbol}{round_amount(amount)}"
