"""Unit tests for fine payment states and calendar arithmetic"""

import pytest
from datetime import date, datetime, timezone, timedelta
from strafen_gateway.domain.amount import Amount
from strafen_gateway.domain.exceptions import PayedStateTransitionError
from strafen_gateway.domain.models import (
    LatePaymentInterest,
    Payed,
    Settled,
    TimePeriod,
    TimeUnit,
    Unpayed,
)
from strafen_gateway.utils.date_utils import add_months, add_years, advance, to_utc


def test_pay_unpayed_fine(make_fine):
    """Test unpayed -> payed"""
    fine = make_fine()
    payed = fine.pay(date(2021, 2, 1), in_app=True)

    assert payed.payed == Payed(date=date(2021, 2, 1), in_app=True)
    assert isinstance(fine.payed, Unpayed)  # Fines are immutable


def test_settle_unpayed_fine(make_fine):
    """Test unpayed -> settled"""
    assert isinstance(make_fine().settle().payed, Settled)


def test_payed_and_settled_are_terminal(make_fine):
    """Test no transitions out of payed or settled"""
    payed = make_fine().pay(date(2021, 2, 1))
    settled = make_fine().settle()

    with pytest.raises(PayedStateTransitionError):
        payed.pay(date(2021, 3, 1))
    with pytest.raises(PayedStateTransitionError):
        payed.settle()
    with pytest.raises(PayedStateTransitionError):
        settled.pay(date(2021, 3, 1))
    with pytest.raises(PayedStateTransitionError):
        settled.settle()


def test_payed_state_to_dict():
    """Test payment states serialize with state discriminator"""
    assert Unpayed().to_dict() == {"state": "unpayed"}
    assert Settled().to_dict() == {"state": "settled"}
    assert Payed(date=date(2021, 1, 1)).to_dict() == {
        "state": "payed",
        "payDate": 1609459200.0,
        "inApp": False,
    }


def test_late_payment_interest_to_dict():
    """Test configuration payload uses the backend field names"""
    interest = LatePaymentInterest(
        interest_free_period=TimePeriod(14, TimeUnit.DAY),
        interest_period=TimePeriod(1, TimeUnit.MONTH),
        interest_rate=0.02,
        compound_interest=True,
    )

    assert interest.to_dict() == {
        "interestFreePeriod": {"value": 14, "unit": "day"},
        "interestPeriod": {"value": 1, "unit": "month"},
        "interestRate": 0.02,
        "compoundInterest": True,
    }


def test_add_months_clamps_day():
    """Test Jan 31 + 1 month => Feb 28/29"""
    assert add_months(date(2021, 1, 31), 1) == date(2021, 2, 28)
    assert add_months(date(2020, 1, 31), 1) == date(2020, 2, 29)
    assert add_months(date(2021, 1, 31), 2) == date(2021, 3, 31)
    assert add_months(date(2021, 11, 15), 3) == date(2022, 2, 15)
    assert add_months(date(2021, 3, 15), -3) == date(2020, 12, 15)


def test_add_months_keeps_time_of_day():
    """Test datetimes keep their time and timezone"""
    moment = datetime(2021, 1, 31, 18, 30, tzinfo=timezone.utc)
    assert add_months(moment, 1) == datetime(2021, 2, 28, 18, 30, tzinfo=timezone.utc)


def test_add_years_leap_day():
    """Test Feb 29 + 1 year => Feb 28"""
    assert add_years(date(2020, 2, 29), 1) == date(2021, 2, 28)
    assert add_years(date(2020, 2, 29), 4) == date(2024, 2, 29)


def test_advance_by_period():
    """Test time periods in days, months and years"""
    start = date(2021, 1, 15)
    assert advance(start, TimePeriod(10, TimeUnit.DAY)) == date(2021, 1, 25)
    assert advance(start, TimePeriod(2, TimeUnit.MONTH), times=2) == date(2021, 5, 15)
    assert advance(start, TimePeriod(1, TimeUnit.YEAR)) == date(2022, 1, 15)
    assert advance(start, TimePeriod(0, TimeUnit.DAY)) == start


def test_to_utc():
    """Test naive datetimes are taken as UTC"""
    naive = datetime(2021, 1, 15, 12, 0)
    assert to_utc(naive) == datetime(2021, 1, 15, 12, 0, tzinfo=timezone.utc)

    cet = datetime(2021, 1, 15, 13, 0, tzinfo=timezone(timedelta(hours=1)))
    assert to_utc(cet).hour == 12


def test_fine_amount_uses_reason_and_number(make_fine):
    """Test base amount of a fine"""
    assert make_fine(amount=Amount(1, 25), number=3).amount == Amount(3, 75)
