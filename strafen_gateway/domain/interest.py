"""Late payment interest engine - interest owed on fines that stay unpayed"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Tuple

from strafen_gateway.domain.amount import Amount
from strafen_gateway.domain.models import (
    Fine,
    LatePaymentInterest,
    Payed,
    Settled,
    TimePeriod,
)
from strafen_gateway.utils.date_utils import advance, to_utc


@dataclass(frozen=True)
class InterestCalculation:
    """Interest owed on a single fine and how it was derived"""

    interest: Amount
    periods: int
    interest_start: Optional[date] = None
    reference_date: Optional[date] = None
    late_payment_interest: Optional[LatePaymentInterest] = None


@dataclass(frozen=True)
class FineSummary:
    """Payed, unpayed and settled totals of a list of fines, interest included"""

    payed: Amount
    unpayed: Amount
    settled: Amount

    @property
    def total(self) -> Amount:
        return self.payed + self.unpayed + self.settled


def _comparable(start: date, reference: date) -> Tuple[date, date]:
    """Bring a date and a datetime (or naive and aware datetimes) to one type"""
    start_is_datetime = isinstance(start, datetime)
    reference_is_datetime = isinstance(reference, datetime)
    if start_is_datetime and reference_is_datetime:
        return to_utc(start), to_utc(reference)
    if start_is_datetime:
        return start.date(), reference
    if reference_is_datetime:
        return start, reference.date()
    return start, reference


def interest_start_date(origin: date, late_payment_interest: LatePaymentInterest) -> date:
    """First date interest can accrue: origin advanced by the interest free period"""
    return advance(origin, late_payment_interest.interest_free_period)


def count_elapsed_periods(start: date, reference: date, period: TimePeriod) -> int:
    """
    Number of whole periods between start and reference.

    Periods are counted by calendar advancement from start (start + k * period),
    so one month after Jan 31 is Feb 28/29 and two months after is Mar 31.
    Partial periods don't count. Non-positive periods never elapse.
    """
    if period.value <= 0:
        return 0
    start, reference = _comparable(start, reference)
    periods = 0
    while advance(start, period, periods + 1) <= reference:
        periods += 1
    return periods


def _accrue(amount: Amount, late_payment_interest: LatePaymentInterest, periods: int) -> Amount:
    rate = late_payment_interest.interest_rate
    if periods <= 0 or rate <= 0:
        return Amount.zero()

    if not late_payment_interest.compound_interest:
        # Per-period interest times n keeps simple interest linear in n
        return (amount * rate) * periods

    principal = amount
    for _ in range(periods):
        principal = principal + principal * rate
    return principal - amount


def calculate_interest(
    fine: Fine,
    default_interest: Optional[LatePaymentInterest] = None,
    now: Optional[date] = None,
) -> InterestCalculation:
    """
    Calculate late payment interest owed on a fine.

    Requirements:
    - Settled fines never accrue interest
    - Payed fines accrue until their pay date, unpayed fines until now
    - Interest starts after the interest free period, strictly after its end
    - Only whole interest periods count
    - Simple interest: amount * rate * periods
    - Compound interest: principal grows by principal * rate every period

    Args:
        fine: Fine to calculate interest for
        default_interest: Club configuration, used when the fine has no override
        now: Reference date for unpayed fines (default: current UTC time)

    Returns:
        InterestCalculation with a non-negative interest amount

    Example:
        100.00, no interest free period, 1% per month, 3 months elapsed
        simple:   3 * 1.00 = 3.00
        compound: 1.00 + 1.01 + 1.02 = 3.03
    """
    late_payment_interest = fine.late_payment_interest or default_interest
    if late_payment_interest is None or isinstance(fine.payed, Settled):
        return InterestCalculation(
            interest=Amount.zero(),
            periods=0,
            late_payment_interest=late_payment_interest,
        )

    if isinstance(fine.payed, Payed):
        reference_date = fine.payed.date
    else:
        reference_date = now if now is not None else datetime.now(timezone.utc)

    start = interest_start_date(fine.date, late_payment_interest)
    comparable_start, comparable_reference = _comparable(start, reference_date)

    periods = 0
    if comparable_reference > comparable_start:
        periods = count_elapsed_periods(start, reference_date, late_payment_interest.interest_period)

    return InterestCalculation(
        interest=_accrue(fine.amount, late_payment_interest, periods),
        periods=periods,
        interest_start=start,
        reference_date=reference_date,
        late_payment_interest=late_payment_interest,
    )


def calculate_late_payment_interest(
    fine: Fine,
    default_interest: Optional[LatePaymentInterest] = None,
    now: Optional[date] = None,
) -> Amount:
    """Interest amount owed on a fine, see calculate_interest"""
    return calculate_interest(fine, default_interest, now).interest


def amount_with_interest(
    fine: Fine,
    default_interest: Optional[LatePaymentInterest] = None,
    now: Optional[date] = None,
) -> Amount:
    """Fine amount plus late payment interest"""
    return fine.amount + calculate_late_payment_interest(fine, default_interest, now)


def summarize_calculations(calculated: Iterable[Tuple[Fine, InterestCalculation]]) -> FineSummary:
    """Sum already calculated fines by payment state, payed and unpayed amounts include interest"""
    payed = unpayed = settled = Amount.zero()
    for fine, calculation in calculated:
        if isinstance(fine.payed, Settled):
            settled += fine.amount
        elif isinstance(fine.payed, Payed):
            payed += fine.amount + calculation.interest
        else:
            unpayed += fine.amount + calculation.interest
    return FineSummary(payed=payed, unpayed=unpayed, settled=settled)


def summarize_fines(
    fines: Iterable[Fine],
    default_interest: Optional[LatePaymentInterest] = None,
    now: Optional[date] = None,
) -> FineSummary:
    """Sum fines by payment state, payed and unpayed amounts include interest"""
    if now is None:
        now = datetime.now(timezone.utc)
    return summarize_calculations(
        (fine, calculate_interest(fine, default_interest, now)) for fine in fines
    )
