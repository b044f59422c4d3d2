"""Catalog store: product CRUD and idempotent manifest import."""

import json
import os
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

import structlog

from database import create_document, doc_to_dict, get_documents, utcnow
from errors import NotFound, ValidationError
from pricing import parse_price
from schemas import ProductIn, ProductUpdate

logger = structlog.get_logger(__name__)

COLLECTION = "product"
COMPARED_FIELDS = ("title", "image", "price", "description")


@dataclass
class ImportResult:
    added: int = 0
    updated: int = 0
    unchanged: int = 0


def _price_value(price: Optional[str]) -> Optional[float]:
    value = parse_price(price)
    return float(value) if value is not None else None


def list_products(database) -> List[Dict[str, Any]]:
    docs = get_documents(database, COLLECTION, sort=[("created_at", -1), ("_id", -1)])
    return [doc_to_dict(d) for d in docs]


def get_product(database, product_id: int) -> Dict[str, Any]:
    doc = database[COLLECTION].find_one({"_id": product_id})
    if not doc:
        raise NotFound(f"Product not found: {product_id}")
    return doc_to_dict(doc)


def create_product(database, product: ProductIn) -> Dict[str, Any]:
    data = product.model_dump()
    if data["price_value"] is None:
        data["price_value"] = _price_value(data["price"])
    doc = create_document(database, COLLECTION, data)
    logger.info("product_created", product_id=doc["_id"], price_value=doc["price_value"])
    return doc_to_dict(doc)


def update_product(database, product_id: int, changes: ProductUpdate) -> Dict[str, Any]:
    data = changes.model_dump(exclude_unset=True)
    if "price" in data and data.get("price_value") is None:
        data["price_value"] = _price_value(data["price"])
    data["updated_at"] = utcnow()
    result = database[COLLECTION].update_one({"_id": product_id}, {"$set": data})
    if result.matched_count == 0:
        raise NotFound(f"Product not found: {product_id}")
    logger.info("product_updated", product_id=product_id, fields=sorted(data))
    return get_product(database, product_id)


def delete_product(database, product_id: int) -> None:
    result = database[COLLECTION].delete_one({"_id": product_id})
    if result.deleted_count == 0:
        raise NotFound(f"Product not found: {product_id}")
    logger.info("product_deleted", product_id=product_id)


# ---------- Import ----------

def manifest_price_value(price: Any, usd_rate: float) -> Optional[float]:
    """Numeric price for a manifest entry, in whole rupees.

    Dollar prices ("$2.50") are converted with ``usd_rate``.
    """
    if price is None or not str(price).strip():
        return None
    value = parse_price(price)
    if value is None:
        return None
    if str(price).strip().startswith("$"):
        value = value * Decimal(str(usd_rate))
    return float(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def load_manifest(path: str) -> List[Dict[str, Any]]:
    if not os.path.exists(path):
        raise NotFound(f"Product manifest not found: {os.path.basename(path)}")
    with open(path, encoding="utf-8") as fh:
        raw = fh.read()
    try:
        entries = json.loads(raw or "[]")
    except json.JSONDecodeError as e:
        raise ValidationError(f"Product manifest is not valid JSON: {e.msg}")
    if not isinstance(entries, list):
        raise ValidationError("Product manifest must be a JSON array")
    return entries


def _desired(entry: Dict[str, Any]) -> Dict[str, Any]:
    raw_id = entry.get("id")
    try:
        product_id = int(raw_id) if raw_id not in (None, "") else None
    except (TypeError, ValueError):
        product_id = None
    return {
        "id": product_id,
        "title": entry.get("title") or "",
        "image": entry.get("image") or "",
        "price": str(entry.get("price") or ""),
        "description": entry.get("description") or "",
    }


def import_products(database, entries: List[Dict[str, Any]], usd_rate: float) -> ImportResult:
    """Insert new manifest products and update changed ones.

    A product matches an entry by id or, failing that, by title. Running the
    same manifest twice changes nothing the second time.
    """
    result = ImportResult()
    products = database[COLLECTION]

    for entry in entries:
        if not isinstance(entry, dict):
            logger.warning("import_entry_skipped", entry=repr(entry)[:80])
            continue
        desired = _desired(entry)
        clauses = [{"title": desired["title"]}]
        if desired["id"] is not None:
            clauses.insert(0, {"_id": desired["id"]})
        existing = products.find_one({"$or": clauses})

        fields = {k: desired[k] for k in COMPARED_FIELDS}
        if existing is None:
            fields["price_value"] = manifest_price_value(desired["price"], usd_rate)
            if desired["id"] is not None:
                fields["_id"] = desired["id"]
            create_document(database, COLLECTION, fields)
            result.added += 1
        elif any(existing.get(k) != fields[k] for k in COMPARED_FIELDS):
            fields["price_value"] = manifest_price_value(desired["price"], usd_rate)
            fields["updated_at"] = utcnow()
            products.update_one({"_id": existing["_id"]}, {"$set": fields})
            result.updated += 1
        else:
            result.unchanged += 1

    logger.info("products_imported", added=result.added, updated=result.updated, unchanged=result.unchanged)
    return result
