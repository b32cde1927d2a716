"""
Script to move a user between the free and premium plans.
Run: python -m scripts.set_user_plan user@example.com premium [--reset-usage]
"""
import argparse
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import PREMIUM_PLAN_NAME
from app.db.session import SessionLocal
from app.db.models.user import User
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def set_user_plan(email: str, plan: str, reset_usage: bool = False) -> bool:
    """Set a user's plan; optionally clear the free usage counter."""
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email.lower()).first()
        if not user:
            logger.error(f"User {email} not found")
            return False

        logger.info(f"Found user: {email} (ID: {user.id}, plan: {user.plan}, free_usage: {user.free_usage})")
        user.plan = plan
        if reset_usage:
            # NULL so the next request re-initializes the counter to 0
            user.free_usage = None
        db.commit()
        logger.info(f"Set user {email} to plan={plan}, reset_usage={reset_usage}")
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating user: {e}", exc_info=True)
        return False
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Change a user's plan.")
    parser.add_argument("email")
    parser.add_argument("plan", choices=["free", PREMIUM_PLAN_NAME])
    parser.add_argument("--reset-usage", action="store_true", help="Clear the free usage counter")
    args = parser.parse_args()

    if set_user_plan(args.email, args.plan, args.reset_usage):
        print(f"\n[SUCCESS] User {args.email} is now on the {args.plan} plan")
    else:
        print(f"\n[ERROR] Failed to update user {args.email}")
        sys.exit(1)
