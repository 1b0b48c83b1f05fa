"""
Domain exceptions for Makola Issue Hub.

Services raise these; routes translate them into HTTP responses.
"""

from typing import Optional


class MakolaError(Exception):
    """Base class for all application errors."""


class ServiceAreaConfigError(MakolaError):
    """The configured service area could not be loaded."""


class OutsideServiceAreaError(MakolaError):
    """Submitted coordinates fall outside the service area."""

    def __init__(self, latitude: float, longitude: float, area_name: str):
        self.latitude = latitude
        self.longitude = longitude
        self.area_name = area_name
        super().__init__(
            f"Selected location is outside {area_name} area. "
            f"Please select a location within {area_name} boundaries."
        )


class ResidentNotFoundError(MakolaError):
    """No resident profile is linked to the given user."""

    def __init__(self, user_id: Optional[str]):
        self.user_id = user_id
        super().__init__("Resident not found for given user_id")


class IssueNotFoundError(MakolaError):
    def __init__(self, issue_id: str):
        self.issue_id = issue_id
        super().__init__(f"Issue not found: {issue_id}")


class IssueActionForbiddenError(MakolaError):
    """The caller's role may not perform this action on an issue."""

    def __init__(self, message: str):
        super().__init__(message)


class InvalidVoteError(MakolaError):
    """Vote action is unknown or would take the count below zero."""

    def __init__(self):
        super().__init__("Invalid vote action")
