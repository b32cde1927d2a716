"""
Identity provider interface and the SQL-backed implementation.

The gateway only talks to identity through IdentityProvider: verify a session
credential, check a plan entitlement, and read/write per-user metadata.
SqlIdentityProvider keeps users in the relational store and issues JWT bearer
tokens; a hosted provider can be swapped in by implementing the same methods.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import AuthenticationError, IdentityProviderError, NotFoundError, ValidationError
from app.core.security import create_access_token, decode_access_token, hash_password, verify_password
from app.db.models.user import User

logger = logging.getLogger(__name__)

FREE_USAGE_KEY = "free_usage"


class IdentityProvider(ABC):
    """Abstract identity provider."""

    @abstractmethod
    def verify_credential(self, token: str) -> str:
        """Return the user id for a session credential or raise AuthenticationError."""

    @abstractmethod
    def has_entitlement(self, user_id: str, plan_name: str) -> bool:
        """Whether the user currently holds the named plan."""

    @abstractmethod
    def get_metadata(self, user_id: str) -> Dict[str, Any]:
        """Private metadata for the user (includes free_usage once set)."""

    @abstractmethod
    def set_metadata(self, user_id: str, values: Dict[str, Any]) -> None:
        """Merge `values` into the user's metadata; keys not named are left untouched."""

    def increment_usage(
        self,
        user_id: str,
        amount: int,
        ceiling: Optional[int] = None,
        prior: Optional[int] = None,
    ) -> Optional[int]:
        """
        Add `amount` to the free-usage counter unless it already reached `ceiling`.

        Returns the new counter, or None when the ceiling refused the update.
        This default is a read-then-write and loses updates under concurrent
        requests from the same user; providers with an atomic primitive override it.
        """
        current = prior
        if current is None:
            current = int(self.get_metadata(user_id).get(FREE_USAGE_KEY) or 0)
        if ceiling is not None and current >= ceiling:
            return None
        new_value = current + amount
        self.set_metadata(user_id, {FREE_USAGE_KEY: new_value})
        return new_value


class SqlIdentityProvider(IdentityProvider):
    """Identity provider backed by the users table."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _get_user(self, db: Session, user_id: str) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def verify_credential(self, token: str) -> str:
        user_id = decode_access_token(token)
        db = self._session_factory()
        try:
            exists = db.query(User.id).filter(User.id == user_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Credential lookup failed: {e}", exc_info=True)
            raise IdentityProviderError() from e
        finally:
            db.close()

        if not exists:
            logger.warning(f"Valid token for unknown user_id={user_id}")
            raise AuthenticationError("Invalid credential")
        return user_id

    def create_user(self, email: str, full_name: str, password: str, plan: str = "free") -> User:
        db = self._session_factory()
        try:
            user = User(
                email=email.lower(),
                full_name=full_name,
                password_hash=hash_password(password),
                plan=plan,
                private_metadata={},
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            logger.info(f"User created: user_id={user.id}, plan={plan}")
            return user
        except IntegrityError as e:
            db.rollback()
            raise ValidationError("Email already registered") from e
        finally:
            db.close()

    def authenticate(self, email: str, password: str) -> str:
        """Check email/password and issue a bearer token."""
        db = self._session_factory()
        try:
            user = db.query(User).filter(User.email == email.lower()).first()
        finally:
            db.close()

        if not user or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        return create_access_token({"sub": user.id})

    # ------------------------------------------------------------------
    # Entitlements and metadata
    # ------------------------------------------------------------------

    def has_entitlement(self, user_id: str, plan_name: str) -> bool:
        db = self._session_factory()
        try:
            user = self._get_user(db, user_id)
            return (user.plan or "free") == plan_name
        except SQLAlchemyError as e:
            logger.error(f"Entitlement lookup failed for user_id={user_id}: {e}", exc_info=True)
            raise IdentityProviderError() from e
        finally:
            db.close()

    def set_plan(self, user_id: str, plan_name: str) -> None:
        db = self._session_factory()
        try:
            user = self._get_user(db, user_id)
            user.plan = plan_name
            db.commit()
            logger.info(f"Plan changed: user_id={user_id}, plan={plan_name}")
        finally:
            db.close()

    def get_metadata(self, user_id: str) -> Dict[str, Any]:
        db = self._session_factory()
        try:
            user = self._get_user(db, user_id)
            metadata = dict(user.private_metadata or {})
            if user.free_usage is not None:
                metadata[FREE_USAGE_KEY] = user.free_usage
            return metadata
        except SQLAlchemyError as e:
            logger.error(f"Metadata read failed for user_id={user_id}: {e}", exc_info=True)
            raise IdentityProviderError() from e
        finally:
            db.close()

    def set_metadata(self, user_id: str, values: Dict[str, Any]) -> None:
        values = dict(values)
        db = self._session_factory()
        try:
            if FREE_USAGE_KEY in values:
                # Counter lives in its own column: a blind overwrite of that field only
                db.execute(
                    update(User)
                    .where(User.id == user_id)
                    .values(free_usage=values.pop(FREE_USAGE_KEY))
                    .execution_options(synchronize_session=False)
                )
            if values:
                user = self._get_user(db, user_id)
                merged = dict(user.private_metadata or {})
                merged.update(values)
                user.private_metadata = merged
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Metadata write failed for user_id={user_id}: {e}", exc_info=True)
            raise IdentityProviderError() from e
        finally:
            db.close()

    def increment_usage(
        self,
        user_id: str,
        amount: int,
        ceiling: Optional[int] = None,
        prior: Optional[int] = None,
    ) -> Optional[int]:
        """Atomic conditional increment: one UPDATE ... WHERE free_usage < ceiling."""
        current = func.coalesce(User.free_usage, 0)
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(free_usage=current + amount)
            .execution_options(synchronize_session=False)
        )
        if ceiling is not None:
            stmt = stmt.where(current < ceiling)

        db = self._session_factory()
        try:
            result = db.execute(stmt)
            if result.rowcount == 0:
                db.rollback()
                return None
            # Read back while the row is still locked by this transaction
            new_value = db.query(User.free_usage).filter(User.id == user_id).scalar()
            db.commit()
            return new_value
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Usage increment failed for user_id={user_id}: {e}", exc_info=True)
            raise IdentityProviderError() from e
        finally:
            db.close()
