import json
import os
from typing import Any, Dict, List

import structlog

from database import create_document, doc_to_dict, get_documents
from schemas import NewsIn

logger = structlog.get_logger(__name__)

COLLECTION = "news"


def list_news(database) -> List[Dict[str, Any]]:
    docs = get_documents(database, COLLECTION, sort=[("_id", -1)])
    return [doc_to_dict(d) for d in docs]


def add_news(database, item: NewsIn) -> Dict[str, Any]:
    doc = create_document(database, COLLECTION, item)
    logger.info("news_added", news_id=doc["_id"])
    return doc_to_dict(doc)


def seed_news(database, path: str) -> int:
    """Load news items from a JSON file into an empty feed.

    A malformed file is logged and skipped; nothing is inserted unless every
    entry is valid.
    """
    if database[COLLECTION].count_documents({}) > 0 or not os.path.exists(path):
        return 0
    try:
        with open(path, encoding="utf-8") as fh:
            entries = json.load(fh)
        if not isinstance(entries, list):
            raise ValueError("news manifest must be a JSON array")
        items = [NewsIn.model_validate(entry) for entry in entries]
    except ValueError as e:  # JSONDecodeError and pydantic.ValidationError included
        logger.warning("news_seed_skipped", path=os.path.basename(path), reason=str(e)[:200])
        return 0
    # Oldest first, so that the newest item gets the highest id
    for item in reversed(items):
        create_document(database, COLLECTION, item)
    logger.info("news_seeded", count=len(items))
    return len(items)
