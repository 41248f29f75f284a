from datetime import datetime


def serialize_mongo(obj):
    """
    Recursively convert MongoDB values to JSON-safe values
    """
    if isinstance(obj, datetime):
        return obj.isoformat()

    if isinstance(obj, list):
        return [serialize_mongo(i) for i in obj]

    if isinstance(obj, dict):
        return {k: serialize_mongo(v) for k, v in obj.items()}

    return obj


def strip_id(doc: dict | None) -> dict | None:
    if doc is None:
        return None
    doc = dict(doc)
    doc.pop("_id", None)
    return doc
