from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models import LoanApplication, LoanStatus
from schemas.loan_application import (
    ApproveRequest,
    EmiQuoteRequest,
    EmiQuoteResponse,
    LoanApplicationRequest,
    LoanApplicationResponse,
    RejectRequest,
    ScheduleRowResponse,
)
from services import loan_lifecycle
from services.financials import amortization_schedule, compute_financials
from services.projection import to_response

router = APIRouter(prefix="/api/loans", tags=["loans"])

MSG_APPLICATION_NOT_FOUND = "Loan application not found"


async def _get_application(db: AsyncSession, application_id: int) -> LoanApplication:
    result = await db.execute(select(LoanApplication).where(LoanApplication.id == application_id))
    app = result.scalar_one_or_none()
    if not app:
        raise HTTPException(status_code=404, detail=MSG_APPLICATION_NOT_FOUND)
    return app


@router.post("/apply", response_model=LoanApplicationResponse, status_code=201)
async def apply(body: LoanApplicationRequest, db: AsyncSession = Depends(get_db)):
    app = loan_lifecycle.create_from_request(body)
    db.add(app)
    await db.flush()
    return to_response(app)


@router.post("/emi-quote", response_model=EmiQuoteResponse)
async def emi_quote(body: EmiQuoteRequest):
    """Quote EMI and total repayable for ad-hoc terms without creating an application."""
    monthly_emi, total_amount = compute_financials(body.loan_amount, body.interest_rate, body.loan_term_months)
    return EmiQuoteResponse(
        loan_amount=body.loan_amount,
        interest_rate=body.interest_rate,
        loan_term_months=body.loan_term_months,
        monthly_emi=monthly_emi,
        total_amount=total_amount,
        total_interest=total_amount - body.loan_amount,
    )


@router.get("", response_model=list[LoanApplicationResponse])
async def list_applications(
    user_id: Optional[str] = Query(None, alias="userId"),
    status: Optional[LoanStatus] = Query(None),
    loan_type: Optional[str] = Query(None, alias="loanType"),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(LoanApplication)
    if user_id:
        stmt = stmt.where(LoanApplication.user_id == user_id)
    if status:
        stmt = stmt.where(LoanApplication.status == status)
    if loan_type:
        stmt = stmt.where(LoanApplication.loan_type == loan_type)
    result = await db.execute(stmt.order_by(LoanApplication.submitted_at.desc(), LoanApplication.id.desc()))
    return [to_response(a) for a in result.scalars().all()]


@router.get("/{application_id}", response_model=LoanApplicationResponse)
async def get_application(application_id: int, db: AsyncSession = Depends(get_db)):
    return to_response(await _get_application(db, application_id))


@router.get("/{application_id}/schedule", response_model=list[ScheduleRowResponse])
async def get_schedule(application_id: int, db: AsyncSession = Depends(get_db)):
    app = await _get_application(db, application_id)
    rows = amortization_schedule(app.loan_amount, app.interest_rate, app.loan_term_months)
    return [ScheduleRowResponse.model_validate(r) for r in rows]


@router.post("/{application_id}/review", response_model=LoanApplicationResponse)
async def start_review(application_id: int, db: AsyncSession = Depends(get_db)):
    app = await _get_application(db, application_id)
    loan_lifecycle.start_review(app)
    await db.flush()
    return to_response(app)


@router.post("/{application_id}/approve", response_model=LoanApplicationResponse)
async def approve(
    application_id: int,
    body: Optional[ApproveRequest] = None,
    db: AsyncSession = Depends(get_db),
):
    app = await _get_application(db, application_id)
    loan_lifecycle.approve(app, body.approval_date if body else None)
    await db.flush()
    return to_response(app)


@router.post("/{application_id}/reject", response_model=LoanApplicationResponse)
async def reject(application_id: int, body: RejectRequest, db: AsyncSession = Depends(get_db)):
    app = await _get_application(db, application_id)
    loan_lifecycle.reject(app, body.reason)
    await db.flush()
    return to_response(app)


@router.post("/{application_id}/disburse", response_model=LoanApplicationResponse)
async def disburse(application_id: int, db: AsyncSession = Depends(get_db)):
    app = await _get_application(db, application_id)
    loan_lifecycle.disburse(app)
    await db.flush()
    return to_response(app)


@router.post("/{application_id}/close", response_model=LoanApplicationResponse)
async def close(application_id: int, db: AsyncSession = Depends(get_db)):
    app = await _get_application(db, application_id)
    loan_lifecycle.close(app)
    await db.flush()
    return to_response(app)
