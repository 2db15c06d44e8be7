# server/core/queries.py

from datetime import date
from pydantic import BaseModel, field_validator
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import ClientInputError, DependencyError, NotFoundError
from core.logging import get_logger
from models.analytics import AnalyticsRecord


logger = get_logger(__name__)


# -------------------------------
# Feature allow-list
# -------------------------------

FEATURE_COLUMNS = {
    "A": AnalyticsRecord.a,
    "B": AnalyticsRecord.b,
    "C": AnalyticsRecord.c,
    "D": AnalyticsRecord.d,
    "E": AnalyticsRecord.e,
    "F": AnalyticsRecord.f,
}


def resolve_feature(feature: str | None) -> str:
    """
    Maps a user-supplied feature name onto a known identifier (A-F).
    The column used in SQL always comes from FEATURE_COLUMNS.
    """
    if not feature or not feature.strip():
        raise ClientInputError("Missing required 'feature' query parameter.")
    key = feature.strip().upper()
    if key not in FEATURE_COLUMNS:
        raise ClientInputError(
            f"Unsupported feature. Expected one of: {', '.join(FEATURE_COLUMNS)}."
        )
    return key


def normalize_gender(gender: str) -> str:
    # stored values are "Male" / "Female"
    return gender.strip().capitalize()


# -------------------------------
# Schemas
# -------------------------------

class AnalyticsFilters(BaseModel):
    age: str | None = None
    gender: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("age", "gender", "start_date", "end_date", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("gender")
    @classmethod
    def canonical_gender(cls, value):
        return normalize_gender(value) if value is not None else None


class SummaryResponse(BaseModel):
    A: int = 0
    B: int = 0
    C: int = 0
    D: int = 0
    E: int = 0
    F: int = 0


class TimeseriesPoint(BaseModel):
    date: date
    value: int


class TimeseriesResponse(BaseModel):
    feature: str
    data: list[TimeseriesPoint]


# -------------------------------
# Query construction
# -------------------------------

def _segment_conditions(filters: AnalyticsFilters) -> list:
    conditions = []
    if filters.age is not None:
        conditions.append(AnalyticsRecord.age == filters.age)
    if filters.gender is not None:
        conditions.append(AnalyticsRecord.gender == filters.gender)
    return conditions


def build_summary_query(filters: AnalyticsFilters):
    """
    Sums the six feature columns over every matching row.
    A date range only applies when both ends are given.
    """
    stmt = select(*[
        func.sum(column).label(name) for name, column in FEATURE_COLUMNS.items()
    ])
    conditions = _segment_conditions(filters)
    if filters.start_date is not None and filters.end_date is not None:
        conditions.append(AnalyticsRecord.day.between(filters.start_date, filters.end_date))
    return stmt.where(*conditions)


def build_timeseries_query(feature: str, filters: AnalyticsFilters):
    """
    Sums one feature per day, ascending. Either end of the date
    range may be given on its own.
    """
    column = FEATURE_COLUMNS[feature]
    stmt = select(
        AnalyticsRecord.day.label("date"),
        func.sum(column).label("value"),
    )
    conditions = _segment_conditions(filters)
    if filters.start_date is not None and filters.end_date is not None:
        conditions.append(AnalyticsRecord.day.between(filters.start_date, filters.end_date))
    elif filters.start_date is not None:
        conditions.append(AnalyticsRecord.day >= filters.start_date)
    elif filters.end_date is not None:
        conditions.append(AnalyticsRecord.day <= filters.end_date)
    return (
        stmt.where(*conditions)
        .group_by(AnalyticsRecord.day)
        .order_by(AnalyticsRecord.day.asc())
    )


# -------------------------------
# Operations
# -------------------------------

def aggregate_summary(db: Session, filters: AnalyticsFilters) -> SummaryResponse:
    try:
        row = db.execute(build_summary_query(filters)).one()
    except SQLAlchemyError:
        logger.error("Aggregate summary query failed", exc_info=True)
        raise DependencyError()

    totals = row._mapping
    return SummaryResponse(**{name: int(totals[name] or 0) for name in FEATURE_COLUMNS})


def timeseries_by_feature(db: Session, feature: str | None, filters: AnalyticsFilters) -> TimeseriesResponse:
    key = resolve_feature(feature)
    try:
        rows = db.execute(build_timeseries_query(key, filters)).all()
    except SQLAlchemyError:
        logger.error("Timeseries query failed for feature %s", key, exc_info=True)
        raise DependencyError()

    if not rows:
        raise NotFoundError("No data found for the given parameters.")

    return TimeseriesResponse(
        feature=key,
        data=[TimeseriesPoint(date=row.date, value=int(row.value or 0)) for row in rows],
    )
