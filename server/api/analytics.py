# server/api/analytics.py

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from api.auth import get_current_user_id
from core.exceptions import ClientInputError
from core.queries import (
    AnalyticsFilters,
    SummaryResponse,
    TimeseriesResponse,
    aggregate_summary,
    timeseries_by_feature,
)
from database import get_db


# Every route here sits behind the session gate
router = APIRouter(prefix="/api", dependencies=[Depends(get_current_user_id)])

# error messages name the query parameters the client sent
QUERY_NAMES = {"start_date": "startDate", "end_date": "endDate"}


def get_filters(
    age: str | None = Query(None),
    gender: str | None = Query(None),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
) -> AnalyticsFilters:
    """
    Collects the optional segment and date filters shared by both charts.
    Malformed dates are reported as a client error.
    """
    try:
        return AnalyticsFilters(age=age, gender=gender, start_date=start_date, end_date=end_date)
    except ValidationError as e:
        fields = sorted({QUERY_NAMES.get(str(err["loc"][0]), str(err["loc"][0])) for err in e.errors()})
        raise ClientInputError(f"Invalid filter value: {', '.join(fields)}.")


@router.get("/aggregate-summary", response_model=SummaryResponse)
@router.get("/bar-data", response_model=SummaryResponse, include_in_schema=False)
def get_aggregate_summary(filters: AnalyticsFilters = Depends(get_filters), db: Session = Depends(get_db)):
    """
    Totals for features A-F over the filtered rows, for the bar chart.
    """
    return aggregate_summary(db, filters)


@router.get("/timeseries", response_model=TimeseriesResponse)
@router.get("/line-chart-data", response_model=TimeseriesResponse, include_in_schema=False)
def get_timeseries(
    feature: str | None = Query(None),
    filters: AnalyticsFilters = Depends(get_filters),
    db: Session = Depends(get_db),
):
    """
    Per-day totals for a single feature, for the line chart.
    """
    return timeseries_by_feature(db, feature, filters)
