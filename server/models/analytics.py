# server/models/analytics.py

from sqlalchemy import Column, Date, Integer, String
from . import Base


class AnalyticsRecord(Base):
    """
    One row of daily feature usage for an age/gender segment.
    Columns a..f hold the time spent on features A..F.
    The API only ever reads this table.
    """
    __tablename__ = "analytics"

    id = Column(Integer, primary_key=True, index=True)
    day = Column(Date, index=True, nullable=False)
    age = Column(String, index=True)
    gender = Column(String, index=True)
    a = Column(Integer, default=0)
    b = Column(Integer, default=0)
    c = Column(Integer, default=0)
    d = Column(Integer, default=0)
    e = Column(Integer, default=0)
    f = Column(Integer, default=0)
