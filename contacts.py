from typing import Any, Dict, List

import structlog

from database import create_document, doc_to_dict, get_documents
from schemas import ContactIn

logger = structlog.get_logger(__name__)

COLLECTION = "contact"


def _to_dict(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = doc_to_dict(doc)
    out["received_at"] = out.pop("created_at", None)
    out.pop("updated_at", None)
    return out


def create_contact(database, contact: ContactIn) -> Dict[str, Any]:
    doc = create_document(database, COLLECTION, contact)
    logger.info("contact_received", contact_id=doc["_id"])
    return _to_dict(doc)


def list_contacts(database) -> List[Dict[str, Any]]:
    docs = get_documents(database, COLLECTION, sort=[("_id", -1)])
    return [_to_dict(d) for d in docs]
