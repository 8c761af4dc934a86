"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Union

from strafen_gateway.domain.amount import Amount
from strafen_gateway.domain.exceptions import PayedStateTransitionError


class TimeUnit(str, Enum):
    """Unit of a time period"""

    DAY = "day"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class TimePeriod:
    """Signed length of time in days, months or years"""

    value: int
    unit: TimeUnit

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "unit": self.unit.value}


@dataclass(frozen=True)
class LatePaymentInterest:
    """Late payment interest configuration of a club"""

    interest_free_period: TimePeriod
    interest_period: TimePeriod
    interest_rate: float  # fraction per interest period, 0.01 = 1%
    compound_interest: bool

    def to_dict(self) -> Dict[str, Any]:
        """Payload shape of the changeLatePaymentInterest function"""
        return {
            "interestFreePeriod": self.interest_free_period.to_dict(),
            "interestPeriod": self.interest_period.to_dict(),
            "interestRate": self.interest_rate,
            "compoundInterest": self.compound_interest,
        }


def _epoch_seconds(moment: date) -> float:
    """Epoch seconds, naive values are taken as UTC"""
    if not isinstance(moment, datetime):
        moment = datetime(moment.year, moment.month, moment.day)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp()


@dataclass(frozen=True)
class Unpayed:
    """Fine isn't payed yet"""

    state: ClassVar[str] = "unpayed"

    def to_dict(self) -> Dict[str, Any]:
        return {"state": self.state}


@dataclass(frozen=True)
class Payed:
    """Fine is payed at the given date"""

    state: ClassVar[str] = "payed"

    date: date
    in_app: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"state": self.state, "payDate": _epoch_seconds(self.date), "inApp": self.in_app}


@dataclass(frozen=True)
class Settled:
    """Fine is waived by the club, no interest is charged"""

    state: ClassVar[str] = "settled"

    def to_dict(self) -> Dict[str, Any]:
        return {"state": self.state}


PayedState = Union[Unpayed, Payed, Settled]


class Importance(str, Enum):
    """Importance of a fine reason"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class FineReason:
    """Reason message, amount and importance of a fine"""

    reason: str
    amount: Amount
    importance: Importance = Importance.MEDIUM


@dataclass(frozen=True)
class Fine:
    """
    Fine of a person, reduced to what interest calculation needs.

    late_payment_interest overrides the club configuration when set.
    """

    id: str
    date: date
    reason: FineReason
    payed: PayedState = field(default_factory=Unpayed)
    number: int = 1
    person_id: Optional[str] = None
    late_payment_interest: Optional[LatePaymentInterest] = None

    @property
    def amount(self) -> Amount:
        """Base amount owed, without interest"""
        return self.reason.amount * self.number

    def pay(self, pay_date: date, in_app: bool = False) -> "Fine":
        """
        Record a payment.

        Raises:
            PayedStateTransitionError: fine is already payed or settled
        """
        self._ensure_unpayed("pay")
        return replace(self, payed=Payed(date=pay_date, in_app=in_app))

    def settle(self) -> "Fine":
        """
        Waive the fine.

        Raises:
            PayedStateTransitionError: fine is already payed or settled
        """
        self._ensure_unpayed("settle")
        return replace(self, payed=Settled())

    def _ensure_unpayed(self, action: str) -> None:
        if not isinstance(self.payed, Unpayed):
            raise PayedStateTransitionError(
                f"Cannot {action} fine {self.id}: already {self.payed.state}"
            )
