"""
Analytics Service - Resident-facing statistics over all issues.

Groups issues by the street/road they were reported on (derived from the
free-text address) and by category.
"""

from app.config.firebase import get_db
from typing import Dict, Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)


# Address suffix patterns, checked in this order within each address part
LOCATION_TYPES = [
    (("Road", "Rd"), "Road"),
    (("Street", "St"), "Street"),
    (("Lane", "Ln"), "Lane"),
    (("Avenue", "Ave"), "Avenue"),
    (("Drive",), "Drive"),
    (("Boulevard",), "Boulevard"),
    (("Court",), "Court"),
    (("Place", "Pl"), "Place"),
    (("Terrace", "Ter"), "Terrace"),
    (("Circle",), "Circle"),
    (("Mawatha", "Mw"), "Mawatha"),
]

ONGOING_STATUSES = ("open", "in_progress")
RESOLVED_STATUS = "resolved"


def extract_location_info(location: Optional[str]) -> Optional[Dict[str, str]]:
    """
    Derive a normalized location name and type from a free-text address.

    "12 Nagoda Rd, Makola" -> {"name": "12 Nagoda Road", "type": "Road"}

    The address is split on commas; the first part containing a word equal
    (case-insensitively) to a known pattern, preceded by at least one word,
    wins.

    Returns:
        Dict with "name" and "type", or None if nothing matched
    """
    if not location:
        return None

    for part in (p.strip() for p in location.split(",")):
        words = part.split()

        for patterns, location_type in LOCATION_TYPES:
            for pattern in patterns:
                pattern_lower = pattern.lower()
                index = next(
                    (i for i, word in enumerate(words) if word.lower() == pattern_lower),
                    -1,
                )
                if index > 0:
                    name = " ".join(words[:index])
                    return {"name": f"{name} {location_type}", "type": location_type}

    return None


def calculate_percentage(part: int, total: int) -> int:
    """Rounded whole-number percentage, 0 when total is 0."""
    if total <= 0:
        return 0
    # Half-up rounding; Python's round() would round halves to even
    return int(part * 100 / total + 0.5)


def build_resident_analytics(issues: Iterable[Dict]) -> Dict:
    """
    Aggregate issue documents into the resident analytics payload.

    Args:
        issues: Dicts with at least "location", "status" and "category"

    Returns:
        Dict with basicStats, locationAnalytics, categoryAnalytics and summary
    """
    issues = list(issues)

    total_issues = len(issues)
    resolved_issues = sum(1 for issue in issues if issue.get("status") == RESOLVED_STATUS)
    ongoing_issues = sum(1 for issue in issues if issue.get("status") in ONGOING_STATUSES)
    overall_success_rate = calculate_percentage(resolved_issues, total_issues)

    # Location breakdown (insertion ordered, sorted below)
    locations: Dict[str, Dict] = {}
    for issue in issues:
        info = extract_location_info(issue.get("location"))
        if info is None:
            continue

        entry = locations.setdefault(
            info["name"],
            {"total": 0, "resolved": 0, "ongoing": 0, "type": info["type"]},
        )
        entry["total"] += 1
        if issue.get("status") == RESOLVED_STATUS:
            entry["resolved"] += 1
        elif issue.get("status") in ONGOING_STATUSES:
            entry["ongoing"] += 1

    location_analytics: List[Dict] = sorted(
        (
            {
                "name": name,
                "type": data["type"],
                "total": data["total"],
                "resolved": data["resolved"],
                "ongoing": data["ongoing"],
                "successRate": calculate_percentage(data["resolved"], data["total"]),
            }
            for name, data in locations.items()
        ),
        key=lambda item: item["total"],
        reverse=True,
    )

    # Category breakdown
    category_counts: Dict[str, int] = {}
    for issue in issues:
        category = issue.get("category")
        category_counts[category] = category_counts.get(category, 0) + 1

    category_analytics: List[Dict] = sorted(
        (
            {
                "category": category,
                "count": count,
                "percentage": calculate_percentage(count, total_issues),
            }
            for category, count in category_counts.items()
        ),
        key=lambda item: item["count"],
        reverse=True,
    )

    best_location = None
    for current in location_analytics:
        if (
            best_location is None
            or current["successRate"] > best_location["successRate"]
            or (
                current["successRate"] == best_location["successRate"]
                and current["resolved"] > best_location["resolved"]
            )
        ):
            best_location = current

    most_reported_location = location_analytics[0] if location_analytics else None
    most_reported_type = category_analytics[0] if category_analytics else None

    return {
        "basicStats": {
            "totalIssues": total_issues,
            "resolvedIssues": resolved_issues,
            "ongoingIssues": ongoing_issues,
            "overallSuccessRate": overall_success_rate,
        },
        "locationAnalytics": location_analytics,
        "categoryAnalytics": category_analytics,
        "summary": {
            "bestPerformingLocation": {
                "name": best_location["name"],
                "successRate": best_location["successRate"],
                "resolvedCount": best_location["resolved"],
            } if best_location else None,
            "mostReportedLocation": {
                "name": most_reported_location["name"],
                "totalIssues": most_reported_location["total"],
            } if most_reported_location else None,
            "mostReportedIssueType": {
                "category": most_reported_type["category"],
                "percentage": most_reported_type["percentage"],
            } if most_reported_type else None,
            "overallSuccessRate": overall_success_rate,
        },
    }


class AnalyticsService:
    """Service for generating resident analytics from stored issues."""

    def __init__(self, db=None):
        self.db = db if db is not None else get_db()

    def get_resident_analytics(self) -> Dict:
        issues = [doc.to_dict() for doc in self.db.collection("issues").stream()]
        logger.info(f"Building resident analytics over {len(issues)} issues")
        return build_resident_analytics(issues)


# Global service instance (singleton pattern)
_analytics_service: Optional[AnalyticsService] = None


def get_analytics_service() -> AnalyticsService:
    """
    Get or create AnalyticsService singleton instance.

    Returns:
        AnalyticsService: The global analytics service instance
    """
    global _analytics_service
    if _analytics_service is None:
        _analytics_service = AnalyticsService()
    return _analytics_service


def reset_analytics_service() -> None:
    global _analytics_service
    _analytics_service = None
