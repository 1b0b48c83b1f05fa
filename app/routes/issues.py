"""
Issue endpoints - API routes for resident issue submission, retrieval, status changes and votes.
"""

import asyncio
import logging
from functools import partial
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from app.core.errors import (
    InvalidVoteError,
    IssueActionForbiddenError,
    IssueNotFoundError,
    OutsideServiceAreaError,
    ResidentNotFoundError,
)
from app.models.issue import (
    IssueCreate,
    IssueCreatedResponse,
    IssueListResponse,
    IssuePriority,
    IssueResponse,
    IssueStatus,
    StatusUpdateRequest,
    StatusUpdateResponse,
    VoteRequest,
    VoteResponse,
)
from app.services.issue_service import get_issue_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/issues", tags=["Issues"])


async def _run_sync(func, *args, **kwargs):
    # Firestore calls are blocking; keep them off the event loop
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, partial(func, *args, **kwargs))


@router.post("", response_model=IssueCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_issue(issue: IssueCreate):
    """
    Submit a new issue (residents only).

    This endpoint:
    1. Validates the payload (role, photos, finite coordinates)
    2. Rejects locations outside the service area
    3. Stores the issue in Firestore (issues collection)
    """
    logger.info(f"📝 POST /issues - user={issue.user_id}, category={issue.category}")

    try:
        created = await _run_sync(get_issue_service().create_issue, issue)
    except (OutsideServiceAreaError, ResidentNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.info(f"✅ Issue created successfully: {created.issue_id}")
    return IssueCreatedResponse(message="Issue created successfully", issue=created)


@router.get("", response_model=IssueListResponse)
async def list_issues(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[str] = Query(None),
    status_filter: Optional[IssueStatus] = Query(None, alias="status"),
    priority: Optional[IssuePriority] = Query(None),
    resident_id: Optional[str] = Query(None),
):
    """
    List issues, newest first, with optional filters.
    """
    return await _run_sync(
        get_issue_service().list_issues,
        page=page,
        limit=limit,
        category=category,
        status=status_filter.value if status_filter else None,
        priority=priority.value if priority else None,
        resident_id=resident_id,
    )


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue(issue_id: str):
    try:
        return await _run_sync(get_issue_service().get_issue, issue_id)
    except IssueNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.patch("/{issue_id}/status", response_model=StatusUpdateResponse)
async def update_issue_status(issue_id: str, update: StatusUpdateRequest):
    """
    Change an issue's workflow status (urban councilors only).
    """
    try:
        result = await _run_sync(
            get_issue_service().update_status,
            issue_id,
            update.status,
            role=update.role,
            user_id=update.user_id,
        )
    except IssueActionForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except IssueNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return StatusUpdateResponse(
        message="Issue status updated successfully",
        issue=result["issue"],
        previousStatus=result["previous_status"],
        newStatus=result["new_status"],
    )


@router.post("/{issue_id}/vote", response_model=VoteResponse)
async def vote_on_issue(issue_id: str, vote: VoteRequest):
    try:
        vote_count = await _run_sync(get_issue_service().vote, issue_id, vote.action)
    except IssueNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidVoteError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return VoteResponse(message="Vote recorded successfully", vote_count=vote_count)
