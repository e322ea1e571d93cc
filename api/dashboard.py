from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models import LoanApplication
from schemas.dashboard import DashboardSummary
from services.dashboard import summarize

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardSummary)
async def get_dashboard(
    user_id: Optional[str] = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(LoanApplication)
    if user_id:
        stmt = stmt.where(LoanApplication.user_id == user_id)
    result = await db.execute(stmt)
    return summarize(result.scalars().all())
