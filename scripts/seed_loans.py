"""
Seed sample loan applications covering every lifecycle status.
Run: python -m scripts.seed_loans (from the repository root).
"""
import asyncio
import logging
import os
import sys

# Add parent so we can import from backend
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from database import AsyncSessionLocal, init_db
from models import LoanApplication
from services import loan_lifecycle
from services.intake import validate_request
from utils.log import configure_logging

logger = logging.getLogger("scripts.seed_loans")

SEED_USER_ID = "seed-customer-1"

APPLICATIONS_DATA = [
    {
        "request": {
            "firstName": "Jane",
            "lastName": "Doe",
            "phoneNumber": "+1-555-0100",
            "email": "jane.doe@example.com",
            "userId": SEED_USER_ID,
            "loanType": "PERSONAL",
            "loanAmount": "120000",
            "interestRate": "10",
            "loanTermMonths": 12,
            "purpose": "Home renovation",
        },
        "steps": [],
    },
    {
        "request": {
            "firstName": "Jane",
            "middleName": "Q",
            "lastName": "Doe",
            "phoneNumber": "+1-555-0100",
            "email": "jane.doe@example.com",
            "userId": SEED_USER_ID,
            "loanType": "AUTO",
            "loanAmount": "25000",
            "interestRate": "7.25",
            "loanTermMonths": 48,
            "collateral": "2022 Honda Civic",
        },
        "steps": [("review",), ("approve",), ("disburse",)],
    },
    {
        "request": {
            "firstName": "Arjun",
            "lastName": "Mehta",
            "phoneNumber": "+91-98200-00000",
            "email": "arjun.mehta@example.com",
            "userId": "seed-customer-2",
            "loanType": "HOME",
            "loanAmount": "2500000",
            "interestRate": "8.5",
            "loanTermMonths": 240,
        },
        "steps": [("review",), ("reject", "Insufficient income documentation")],
    },
]

STEP_ACTIONS = {
    "review": loan_lifecycle.start_review,
    "approve": loan_lifecycle.approve,
    "reject": loan_lifecycle.reject,
    "disburse": loan_lifecycle.disburse,
    "close": loan_lifecycle.close,
}


async def seed():
    configure_logging(json_output=False)
    await init_db()
    async with AsyncSessionLocal() as session:
        existing = await session.execute(
            select(LoanApplication.id).where(LoanApplication.user_id == SEED_USER_ID).limit(1)
        )
        if existing.scalar_one_or_none() is not None:
            logger.info("Seed applications already exist, skipping")
            return
        for data in APPLICATIONS_DATA:
            request = validate_request(data["request"])
            app = loan_lifecycle.create_from_request(request)
            for action, *args in data["steps"]:
                STEP_ACTIONS[action](app, *args)
            session.add(app)
            logger.info("Seeded %s loan for %s (%s)", app.loan_type, request.full_name, app.status.value)
        await session.commit()
    logger.info("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
