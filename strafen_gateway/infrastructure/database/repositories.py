"""Data access layer for club configuration"""

from typing import Optional
from sqlalchemy.orm import Session
from strafen_gateway.infrastructure.database.models import ClubLatePaymentInterest
from strafen_gateway.domain.models import LatePaymentInterest, TimePeriod, TimeUnit


class LatePaymentInterestRepository:
    """Repository for the late payment interest slot of each club"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, club_id: str) -> Optional[LatePaymentInterest]:
        """Fetch club configuration, None if the club has none"""
        row = self.db.get(ClubLatePaymentInterest, club_id)
        if row is None:
            return None
        return LatePaymentInterest(
            interest_free_period=TimePeriod(row.interest_free_value, TimeUnit(row.interest_free_unit)),
            interest_period=TimePeriod(row.interest_value, TimeUnit(row.interest_unit)),
            interest_rate=row.interest_rate,
            compound_interest=row.compound_interest,
        )

    def set(self, club_id: str, interest: LatePaymentInterest) -> ClubLatePaymentInterest:
        """Replace club configuration, creating the slot if needed"""
        row = self.db.get(ClubLatePaymentInterest, club_id)
        if row is None:
            row = ClubLatePaymentInterest(club_id=club_id)
            self.db.add(row)

        row.interest_free_value = interest.interest_free_period.value
        row.interest_free_unit = interest.interest_free_period.unit.value
        row.interest_value = interest.interest_period.value
        row.interest_unit = interest.interest_period.unit.value
        row.interest_rate = interest.interest_rate
        row.compound_interest = interest.compound_interest

        self.db.flush()
        return row

    def remove(self, club_id: str) -> bool:
        """Delete club configuration, False if there was none"""
        row = self.db.get(ClubLatePaymentInterest, club_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True
