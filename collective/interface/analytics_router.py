"""Read-only analytics endpoints."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from collective.core.config import Constants
from collective.core.errors import (
    AnalyticsError,
    EmptyGroupError,
    InvalidItemError,
    UnknownMemberError,
    classify_analytics_error,
)
from collective.models.service_models import (
    GroupMonthAnalytics,
    GroupWeekAnalytics,
    MonthAnalytics,
    UserAnalytics,
    WeekAnalytics,
)
from collective.services import analytics_service
from collective.services.repository import Fixture


router = APIRouter(prefix="/analytics", tags=["analytics"])
logger = logging.getLogger(__name__)

NOW_QUERY = Query(default=None, description="Reference instant (ISO 8601); defaults to the current time")


def get_store(request: Request) -> Fixture:
    """Return the collections loaded at startup.

    Raises:
        HTTPException: 503 if no data has been loaded
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Analytics data not loaded")
    return store


def _reference_now(now: datetime | None) -> datetime:
    # The wall clock is read here, at the edge, and injected from then on
    return now if now is not None else datetime.now(UTC)


def _http_error(error: AnalyticsError) -> HTTPException:
    response = classify_analytics_error(error)
    if isinstance(error, InvalidItemError):
        status_code = Constants.HTTP_UNPROCESSABLE
    elif isinstance(error, (EmptyGroupError, UnknownMemberError)):
        status_code = Constants.HTTP_NOT_FOUND
    else:
        status_code = Constants.HTTP_SERVER_ERROR
    logger.warning(
        "analytics_request_failed",
        extra={"code": response.code, "error": response.message, "status_code": status_code},
    )
    return HTTPException(status_code=status_code, detail=response.model_dump(mode="json"))


@router.get("/members/{member_id}/week")
async def get_member_week(
    member_id: str,
    now: datetime | None = NOW_QUERY,
    store: Fixture = Depends(get_store),
) -> WeekAnalytics:
    """Weekly analytics for one member."""
    try:
        store.members.get(member_id)
        return analytics_service.compute_user_week(store.items.snapshot(), member_id, _reference_now(now))
    except AnalyticsError as e:
        raise _http_error(e) from e


@router.get("/members/{member_id}/month")
async def get_member_month(
    member_id: str,
    now: datetime | None = NOW_QUERY,
    store: Fixture = Depends(get_store),
) -> MonthAnalytics:
    """Monthly analytics for one member."""
    try:
        store.members.get(member_id)
        return analytics_service.compute_user_month(store.items.snapshot(), member_id, _reference_now(now))
    except AnalyticsError as e:
        raise _http_error(e) from e


@router.get("/members")
async def get_all_members(
    now: datetime | None = NOW_QUERY,
    group_id: str | None = Query(default=None, description="Only members of this group"),
    store: Fixture = Depends(get_store),
) -> dict[str, UserAnalytics]:
    """Week and month analytics for every member, keyed by member ID."""
    if group_id is None:
        members, items = store.members.snapshot(), store.items.snapshot()
    else:
        members, items = store.members.for_group(group_id), store.items.for_group(group_id)

    try:
        return analytics_service.compute_all_users(items, members, _reference_now(now))
    except AnalyticsError as e:
        raise _http_error(e) from e


@router.get("/groups/{group_id}/week")
async def get_group_week(
    group_id: str,
    now: datetime | None = NOW_QUERY,
    store: Fixture = Depends(get_store),
) -> GroupWeekAnalytics:
    """Weekly rollup for a group."""
    try:
        return analytics_service.compute_group_week(
            store.items.for_group(group_id),
            store.members.for_group(group_id),
            _reference_now(now),
            group_id=group_id,
        )
    except AnalyticsError as e:
        raise _http_error(e) from e


@router.get("/groups/{group_id}/month")
async def get_group_month(
    group_id: str,
    now: datetime | None = NOW_QUERY,
    store: Fixture = Depends(get_store),
) -> GroupMonthAnalytics:
    """Monthly rollup for a group."""
    try:
        return analytics_service.compute_group_month(
            store.items.for_group(group_id),
            store.members.for_group(group_id),
            _reference_now(now),
            group_id=group_id,
        )
    except AnalyticsError as e:
        raise _http_error(e) from e
