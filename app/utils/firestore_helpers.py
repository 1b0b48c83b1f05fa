"""
Firestore query helpers shared by the services.
"""

from typing import Dict, Optional


def where_filter(query, field_path: str, op_string: str, value):
    """
    Apply a single field filter.

    Positional arguments work with both firebase_admin and the mock client.

    Usage:
        query = where_filter(collection, "status", "==", "open")
    """
    return query.where(field_path, op_string, value)


def apply_equality_filters(query, filters: Dict[str, Optional[object]]):
    """
    Chain "==" filters for every non-empty value in ``filters``.

    Usage:
        query = apply_equality_filters(issues_ref, {"category": "Roads", "status": None})
    """
    for field_path, value in filters.items():
        if value is None or value == "":
            continue
        query = where_filter(query, field_path, "==", value)
    return query
