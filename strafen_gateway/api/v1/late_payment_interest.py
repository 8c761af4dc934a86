"""Late payment interest configuration endpoints (changeLatePaymentInterest)"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from strafen_gateway.api.dependencies import get_request_id
from strafen_gateway.api.v1.schemas import (
    ChangeLatePaymentInterestRequest,
    ChangeLatePaymentInterestResponse,
    LatePaymentInterestSchema,
)
from strafen_gateway.infrastructure.database.session import get_db
from strafen_gateway.infrastructure.database.repositories import LatePaymentInterestRepository
from strafen_gateway.infrastructure.observability.logging import log_interest_change
from strafen_gateway.infrastructure.observability.metrics import record_interest_change

router = APIRouter()


@router.post("/late-payment-interest", response_model=ChangeLatePaymentInterestResponse)
def change_late_payment_interest(
    request_body: ChangeLatePaymentInterestRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Update or remove the late payment interest of a club.

    Each club has a single configuration slot: update replaces it, remove
    deletes it. Interest already shown for fines isn't recomputed here, it is
    recalculated whenever fines are requested again.
    """
    request_id = get_request_id(request)
    repository = LatePaymentInterestRepository(db)

    try:
        if request_body.change_type == "update":
            repository.set(request_body.club_id, request_body.late_payment_interest.to_domain())
            changed = True
        else:
            changed = repository.remove(request_body.club_id)
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Changing late payment interest failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_interest_change(request_body.change_type)
    log_interest_change(request_id, request_body.club_id, request_body.change_type, changed)

    return ChangeLatePaymentInterestResponse(
        club_id=request_body.club_id,
        change_type=request_body.change_type,
        changed=changed,
    )


@router.get("/clubs/{club_id}/late-payment-interest", response_model=LatePaymentInterestSchema)
def get_late_payment_interest(club_id: str, db: Session = Depends(get_db)):
    """Current late payment interest of a club"""
    interest = LatePaymentInterestRepository(db).get(club_id)
    if interest is None:
        raise HTTPException(status_code=404, detail="Late payment interest not found")
    return LatePaymentInterestSchema.from_domain(interest)
