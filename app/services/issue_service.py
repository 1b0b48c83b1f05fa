"""
Issue service - Business logic for issue submission, retrieval, status changes and votes.
Handles Firestore CRUD operations for issues.

DESIGN NOTE:
- Issues located outside the service area are rejected before anything is stored
- Only registered residents can submit issues
- Only urban councilors can change an issue's status
- New issues and status changes are announced through the injected Notifier (best-effort)
"""

from firebase_admin import firestore
from app.config.firebase import get_db
from app.core.errors import (
    InvalidVoteError,
    IssueActionForbiddenError,
    IssueNotFoundError,
    OutsideServiceAreaError,
    ResidentNotFoundError,
)
from app.core.settings import settings
from app.models.issue import IssueCreate, IssueResponse, IssueStatus
from app.models.location import GeoPoint
from app.services.geofence import GeofenceValidator, get_geofence_validator
from app.services.notifier import LoggingNotifier, Notifier
from app.utils.datetime_helpers import format_to_local_time
from app.utils.firestore_helpers import apply_equality_filters, where_filter
from typing import Dict, Optional
import math
import logging

logger = logging.getLogger(__name__)

ISSUES_COLLECTION = "issues"
RESIDENTS_COLLECTION = "residents"
STATUS_CHANGE_ROLE = "urban_councilor"


class IssueService:
    """
    Service for creating, listing and updating issues.
    """

    def __init__(self, db, validator: GeofenceValidator, notifier: Notifier):
        self.db = db
        self.validator = validator
        self.notifier = notifier

    def create_issue(self, issue_data: IssueCreate) -> IssueResponse:
        """
        Validate and store a new issue.

        Flow:
        1. Reject coordinates outside the service area
        2. Map user_id to the resident profile
        3. Store the issue with status "open"
        4. Publish an "issue_created" event

        Args:
            issue_data: Validated issue data from POST request

        Returns:
            IssueResponse: The stored issue

        Raises:
            OutsideServiceAreaError: Coordinates are outside the service area
            ResidentNotFoundError: No resident is linked to issue_data.user_id
        """
        if issue_data.has_coordinates():
            point = GeoPoint(latitude=issue_data.latitude, longitude=issue_data.longitude)
            if not self.validator.is_within_service_area(point):
                logger.info(f"Issue rejected for user {issue_data.user_id}: outside service area")
                raise OutsideServiceAreaError(
                    issue_data.latitude,
                    issue_data.longitude,
                    self.validator.service_area.name,
                )

        resident_id, resident = self._find_resident(issue_data.user_id)

        doc_ref = self.db.collection(ISSUES_COLLECTION).document()
        issue_dict = {
            "issue_id": doc_ref.id,
            "title": issue_data.title,
            "photos": issue_data.photos,
            "category": issue_data.category,
            "description": issue_data.description,
            "priority": issue_data.priority.value,
            "location": issue_data.location,
            "latitude": issue_data.latitude,
            "longitude": issue_data.longitude,
            "date_observed": issue_data.date_observed,
            "time_observed": issue_data.time_observed,
            "user_id": issue_data.user_id,
            "resident_id": resident_id,
            "status": IssueStatus.OPEN.value,
            "vote_count": 0,
            "created_date": firestore.SERVER_TIMESTAMP,
        }

        try:
            doc_ref.set(issue_dict)
            logger.info(f"Issue saved to Firestore: {doc_ref.id}")
        except Exception as e:
            logger.error(f"Failed to save issue to Firestore: {e}", exc_info=True)
            raise

        stored = doc_ref.get().to_dict()
        stored["residents"] = resident
        issue = self._to_response(doc_ref.id, stored)

        self._publish("issue_created", {
            "issue_id": issue.issue_id,
            "title": issue.title,
            "category": issue.category,
            "priority": issue.priority.value,
        })

        return issue

    def list_issues(
        self,
        page: int = 1,
        limit: int = 10,
        category: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        resident_id: Optional[str] = None,
    ) -> Dict:
        """
        List issues newest first with optional filters and pagination.

        Returns:
            Dict with "issues" and "pagination" keys
        """
        filters = {
            "category": category,
            "status": status,
            "priority": priority,
            "resident_id": resident_id,
        }
        query = apply_equality_filters(self.db.collection(ISSUES_COLLECTION), filters)

        total = self._count(query)

        page_query = (
            query.order_by("created_date", direction=firestore.Query.DESCENDING)
            .offset((page - 1) * limit)
            .limit(limit)
        )

        issues = []
        residents_cache: Dict[str, Optional[Dict]] = {}
        for doc in page_query.stream():
            data = doc.to_dict()
            rid = data.get("resident_id")
            if rid not in residents_cache:
                residents_cache[rid] = self._get_resident_summary(rid)
            data["residents"] = residents_cache[rid]
            issues.append(self._to_response(doc.id, data))

        return {
            "issues": issues,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit) if limit else 0,
            },
        }

    def get_issue(self, issue_id: str) -> IssueResponse:
        """
        Retrieve a single issue by ID.

        Raises:
            IssueNotFoundError: If no issue exists with this ID
        """
        doc = self.db.collection(ISSUES_COLLECTION).document(issue_id).get()
        if not doc.exists:
            raise IssueNotFoundError(issue_id)

        data = doc.to_dict()
        data["residents"] = self._get_resident_summary(data.get("resident_id"))
        return self._to_response(doc.id, data)

    def update_status(
        self,
        issue_id: str,
        new_status: IssueStatus,
        role: str,
        user_id: Optional[str] = None,
    ) -> Dict:
        """
        Move an issue to a new workflow status (urban councilors only).

        Publishes "issue_status_changed" through the notifier (best-effort).

        Returns:
            Dict with "issue", "previous_status" and "new_status"

        Raises:
            IssueActionForbiddenError: Caller is not an urban councilor
            IssueNotFoundError: If no issue exists with this ID
        """
        if role != STATUS_CHANGE_ROLE:
            raise IssueActionForbiddenError("Only urban councilors can change issue status")

        doc_ref = self.db.collection(ISSUES_COLLECTION).document(issue_id)
        current = doc_ref.get()
        if not current.exists:
            raise IssueNotFoundError(issue_id)

        previous_status = current.to_dict().get("status", IssueStatus.OPEN.value)
        doc_ref.update({"status": new_status.value})
        logger.info(f"✅ Issue {issue_id} status {previous_status} -> {new_status.value} (by {user_id or 'unknown'})")

        issue = self.get_issue(issue_id)
        self._publish("issue_status_changed", {
            "issue_id": issue_id,
            "previous_status": previous_status,
            "new_status": new_status.value,
            "title": issue.title,
            "reporter_user_id": issue.user_id,
        })

        return {
            "issue": issue,
            "previous_status": previous_status,
            "new_status": new_status.value,
        }

    def vote(self, issue_id: str, action: str) -> int:
        """
        Apply an upvote or downvote and return the new vote count.

        Raises:
            IssueNotFoundError: If no issue exists with this ID
            InvalidVoteError: Unknown action, or a downvote at zero
        """
        doc_ref = self.db.collection(ISSUES_COLLECTION).document(issue_id)
        doc = doc_ref.get()
        if not doc.exists:
            raise IssueNotFoundError(issue_id)

        vote_count = doc.to_dict().get("vote_count", 0)
        if action == "upvote":
            vote_count += 1
        elif action == "downvote" and vote_count > 0:
            vote_count -= 1
        else:
            raise InvalidVoteError()

        doc_ref.update({"vote_count": vote_count})
        return vote_count

    def _publish(self, event: str, payload: Dict) -> None:
        try:
            self.notifier.publish(event, payload)
        except Exception as e:
            # Notification is best-effort; the write has already happened
            logger.warning(f"⚠️ Failed to publish {event} for {payload.get('issue_id')}: {e}")

    @staticmethod
    def _count(query) -> int:
        # Server-side count aggregation; documents are not transferred
        result = query.count(alias="total").get()
        return int(result[0][0].value)

    def _find_resident(self, user_id: str):
        query = where_filter(self.db.collection(RESIDENTS_COLLECTION), "user_id", "==", user_id).limit(1)
        docs = list(query.stream())
        if not docs:
            raise ResidentNotFoundError(user_id)

        data = docs[0].to_dict()
        return docs[0].id, self._summarize_resident(data)

    def _get_resident_summary(self, resident_id: Optional[str]) -> Optional[Dict]:
        if not resident_id:
            return None
        doc = self.db.collection(RESIDENTS_COLLECTION).document(resident_id).get()
        if not doc.exists:
            return None
        return self._summarize_resident(doc.to_dict())

    @staticmethod
    def _summarize_resident(data: Dict) -> Dict:
        return {
            "name": data.get("name"),
            "address": data.get("address"),
            "phone_number": data.get("phone_number"),
        }

    @staticmethod
    def _to_response(issue_id: str, data: Dict) -> IssueResponse:
        return IssueResponse(
            issue_id=issue_id,
            title=data["title"],
            photos=data.get("photos") or [],
            category=data["category"],
            description=data.get("description"),
            status=data.get("status", IssueStatus.OPEN.value),
            priority=data.get("priority", "medium"),
            created_date=format_to_local_time(data.get("created_date"), settings.DISPLAY_TIMEZONE),
            vote_count=data.get("vote_count", 0),
            location=data.get("location"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            date_observed=data.get("date_observed"),
            time_observed=data.get("time_observed"),
            user_id=data.get("user_id"),
            resident_id=data["resident_id"],
            residents=data.get("residents"),
        )


# Global service instance (singleton pattern)
_issue_service: Optional[IssueService] = None


def get_issue_service() -> IssueService:
    """
    Get or create IssueService singleton instance.

    Returns:
        IssueService: The global issue service instance
    """
    global _issue_service
    if _issue_service is None:
        _issue_service = IssueService(
            db=get_db(),
            validator=get_geofence_validator(),
            notifier=LoggingNotifier(),
        )
    return _issue_service


def reset_issue_service() -> None:
    global _issue_service
    _issue_service = None
