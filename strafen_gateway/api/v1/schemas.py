"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from strafen_gateway.domain.amount import Amount
from strafen_gateway.domain.exceptions import UnknownFineReasonError
from strafen_gateway.domain.models import (
    Fine,
    FineReason,
    Importance,
    LatePaymentInterest,
    Payed,
    PayedState,
    Settled,
    TimePeriod,
    TimeUnit,
    Unpayed,
)
from strafen_gateway.utils.date_utils import to_utc


class CamelModel(BaseModel):
    """Fields are camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimePeriodSchema(CamelModel):
    """Length of time, e.g. {"value": 1, "unit": "month"}"""

    value: int
    unit: TimeUnit

    def to_domain(self) -> TimePeriod:
        return TimePeriod(value=self.value, unit=self.unit)

    @classmethod
    def from_domain(cls, period: TimePeriod) -> "TimePeriodSchema":
        return cls(value=period.value, unit=period.unit)


class LatePaymentInterestSchema(CamelModel):
    """Late payment interest configuration of a club"""

    interest_free_period: TimePeriodSchema
    interest_period: TimePeriodSchema
    interest_rate: float = Field(..., ge=0, allow_inf_nan=False, description="Fraction per interest period, 0.01 = 1%")
    compound_interest: bool

    @field_validator("interest_period")
    @classmethod
    def interest_period_positive(cls, period: TimePeriodSchema) -> TimePeriodSchema:
        if period.value <= 0:
            raise ValueError("Interest period must be positive")
        return period

    def to_domain(self) -> LatePaymentInterest:
        return LatePaymentInterest(
            interest_free_period=self.interest_free_period.to_domain(),
            interest_period=self.interest_period.to_domain(),
            interest_rate=self.interest_rate,
            compound_interest=self.compound_interest,
        )

    @classmethod
    def from_domain(cls, interest: LatePaymentInterest) -> "LatePaymentInterestSchema":
        return cls(
            interest_free_period=TimePeriodSchema.from_domain(interest.interest_free_period),
            interest_period=TimePeriodSchema.from_domain(interest.interest_period),
            interest_rate=interest.interest_rate,
            compound_interest=interest.compound_interest,
        )


class ChangeLatePaymentInterestRequest(CamelModel):
    """Request body for POST /v1/late-payment-interest"""

    club_id: str = Field(..., min_length=1, description="Club identifier")
    change_type: Literal["update", "remove"]
    late_payment_interest: Optional[LatePaymentInterestSchema] = None

    @model_validator(mode="after")
    def interest_required_for_update(self) -> "ChangeLatePaymentInterestRequest":
        if self.change_type == "update" and self.late_payment_interest is None:
            raise ValueError("latePaymentInterest is required for changeType 'update'")
        return self


class ChangeLatePaymentInterestResponse(CamelModel):
    """Response for POST /v1/late-payment-interest"""

    club_id: str
    change_type: Literal["update", "remove"]
    changed: bool


class PayedStateSchema(CamelModel):
    """Payment state of a fine, discriminated by state"""

    state: Literal["unpayed", "payed", "settled"]
    pay_date: Optional[datetime] = None
    in_app: Optional[bool] = None

    @model_validator(mode="after")
    def pay_date_required_for_payed(self) -> "PayedStateSchema":
        if self.state == "payed" and self.pay_date is None:
            raise ValueError("payDate is required for state 'payed'")
        return self

    def to_domain(self) -> PayedState:
        if self.state == "payed":
            return Payed(date=to_utc(self.pay_date), in_app=bool(self.in_app))
        if self.state == "settled":
            return Settled()
        return Unpayed()


class FineReasonSchema(CamelModel):
    """Custom fine reason with message, amount and importance"""

    reason: str
    amount: float = Field(..., description="Non-negative amount, e.g. 2.50")
    importance: Importance = Importance.MEDIUM

    @field_validator("amount")
    @classmethod
    def amount_not_negative(cls, amount: float) -> float:
        Amount.decode(amount)
        return amount

    def to_domain(self) -> FineReason:
        return FineReason(
            reason=self.reason,
            amount=Amount.decode(self.amount),
            importance=self.importance,
        )


class FineReasonTemplateSchema(CamelModel):
    """Fine reason referencing a club reason template"""

    template_id: str


class FineSchema(CamelModel):
    """Fine with origin date (epoch seconds or ISO 8601) and payment state"""

    id: str
    person_id: Optional[str] = None
    date: datetime
    payed: PayedStateSchema
    number: int = Field(1, ge=1)
    reason: Union[FineReasonSchema, FineReasonTemplateSchema]
    late_payment_interest: Optional[LatePaymentInterestSchema] = None

    def to_domain(self, reason_templates: Dict[str, FineReason]) -> Fine:
        """
        Raises:
            UnknownFineReasonError: reason references a template that isn't given
        """
        if isinstance(self.reason, FineReasonTemplateSchema):
            reason = reason_templates.get(self.reason.template_id)
            if reason is None:
                raise UnknownFineReasonError(
                    f"Unknown reason template {self.reason.template_id} for fine {self.id}"
                )
        else:
            reason = self.reason.to_domain()

        return Fine(
            id=self.id,
            date=to_utc(self.date),
            reason=reason,
            payed=self.payed.to_domain(),
            number=self.number,
            person_id=self.person_id,
            late_payment_interest=(
                self.late_payment_interest.to_domain() if self.late_payment_interest else None
            ),
        )


class FineInterestRequest(CamelModel):
    """Request body for POST /v1/clubs/{club_id}/fines/interest"""

    fines: List[FineSchema]
    reason_templates: Dict[str, FineReasonSchema] = Field(default_factory=dict)
    now: Optional[datetime] = Field(None, description="Reference date for unpayed fines (default: now)")


class FineInterestItem(CamelModel):
    """Interest of a single fine, amounts as real numbers"""

    id: str
    amount: float
    interest: float
    total: float
    periods: int


class FineSummarySchema(CamelModel):
    """Payed, unpayed and settled totals, interest included"""

    payed: float
    unpayed: float
    settled: float
    total: float


class FineInterestResponse(CamelModel):
    """Response for POST /v1/clubs/{club_id}/fines/interest"""

    club_id: str
    fines: List[FineInterestItem]
    summary: FineSummarySchema
