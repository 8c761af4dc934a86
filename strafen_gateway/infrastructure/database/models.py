"""SQLAlchemy ORM models"""

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class ClubLatePaymentInterest(Base):
    """Late payment interest configuration slot, at most one row per club"""

    __tablename__ = "club_late_payment_interest"

    club_id = Column(Text, primary_key=True)
    interest_free_value = Column(Integer, nullable=False)
    interest_free_unit = Column(Text, nullable=False)
    interest_value = Column(Integer, nullable=False)
    interest_unit = Column(Text, nullable=False)
    interest_rate = Column(Float, nullable=False)
    compound_interest = Column(Boolean, nullable=False, default=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
