"""POST /v1/clubs/{club_id}/fines/interest - late payment interest of fines"""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from strafen_gateway.api.dependencies import get_request_id
from strafen_gateway.api.v1.schemas import (
    FineInterestItem,
    FineInterestRequest,
    FineInterestResponse,
    FineSummarySchema,
)
from strafen_gateway.domain.exceptions import UnknownFineReasonError
from strafen_gateway.domain.interest import calculate_interest, summarize_calculations
from strafen_gateway.infrastructure.database.session import get_db
from strafen_gateway.infrastructure.database.repositories import LatePaymentInterestRepository
from strafen_gateway.infrastructure.observability.logging import log_interest_calculation
from strafen_gateway.infrastructure.observability.metrics import record_interest_calculation
from strafen_gateway.utils.date_utils import to_utc

router = APIRouter()


@router.post("/clubs/{club_id}/fines/interest", response_model=FineInterestResponse)
def calculate_fines_interest(
    club_id: str,
    request_body: FineInterestRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Calculate late payment interest for fines of a club.

    Flow:
    1. Resolve fine reasons (custom or club templates)
    2. Load the club's late payment interest, fines may override it
    3. Calculate interest per fine as of payment date or now
    4. Return per fine amounts and payed/unpayed/settled totals
    """
    request_id = get_request_id(request)

    try:
        reason_templates = {
            template_id: reason.to_domain()
            for template_id, reason in request_body.reason_templates.items()
        }
        fines = [fine.to_domain(reason_templates) for fine in request_body.fines]
    except UnknownFineReasonError as e:
        logging.warning(f"Invalid fine data: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    club_interest = LatePaymentInterestRepository(db).get(club_id)
    now = to_utc(request_body.now) if request_body.now else datetime.now(timezone.utc)

    items = []
    calculated = []
    for fine in fines:
        calculation = calculate_interest(fine, club_interest, now)
        calculated.append((fine, calculation))
        record_interest_calculation(calculation, fine.payed)
        log_interest_calculation(request_id, club_id, fine.id, calculation)

        items.append(
            FineInterestItem(
                id=fine.id,
                amount=fine.amount.encode(),
                interest=calculation.interest.encode(),
                total=(fine.amount + calculation.interest).encode(),
                periods=calculation.periods,
            )
        )

    summary = summarize_calculations(calculated)

    return FineInterestResponse(
        club_id=club_id,
        fines=items,
        summary=FineSummarySchema(
            payed=summary.payed.encode(),
            unpayed=summary.unpayed.encode(),
            settled=summary.settled.encode(),
            total=summary.total.encode(),
        ),
    )
