"""
Creation ledger.

Append-only record of generation results plus the like toggle. Each operation
runs in its own short transaction. Likes are toggled with single-row
DELETE/INSERT statements against creation_likes, so concurrent toggles on the
same creation by different users never overwrite each other.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import delete, desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.capabilities import CreationType
from app.core.errors import NotFoundError, PersistenceError
from app.db.models.creation import Creation, CreationLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreationRecord:
    """Detached view of a Creation row."""
    id: int
    user_id: str
    prompt: str
    content: str
    type: str
    publish: bool
    created_at: Optional[datetime]
    likes: List[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Creation) -> "CreationRecord":
        return cls(
            id=row.id,
            user_id=row.user_id,
            prompt=row.prompt,
            content=row.content,
            type=row.type,
            publish=bool(row.publish),
            created_at=row.created_at,
            likes=list(row.likes),
        )


class CreationLedger:

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def append(
        self,
        user_id: str,
        prompt: str,
        content: str,
        type: CreationType,
        publish: bool = False,
    ) -> CreationRecord:
        """
        Record one successful generation.

        Raises:
            PersistenceError: the store rejected or could not take the write
        """
        creation_type = CreationType(type)
        db = self._session_factory()
        try:
            row = Creation(
                user_id=user_id,
                prompt=prompt,
                content=content,
                type=creation_type.value,
                publish=bool(publish),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            record = CreationRecord.from_row(row)
            logger.info(f"Creation recorded: id={record.id}, user_id={user_id}, type={record.type}, publish={record.publish}")
            return record
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to record creation for user_id={user_id}: {e}", exc_info=True)
            raise PersistenceError() from e
        finally:
            db.close()

    def get(self, creation_id: int) -> Optional[CreationRecord]:
        db = self._session_factory()
        try:
            row = db.query(Creation).filter(Creation.id == creation_id).first()
            return CreationRecord.from_row(row) if row else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to load creation id={creation_id}: {e}", exc_info=True)
            raise PersistenceError("Failed to load creation") from e
        finally:
            db.close()

    def list_for_user(self, user_id: str) -> List[CreationRecord]:
        """All creations owned by the user, newest first."""
        db = self._session_factory()
        try:
            rows = (
                db.query(Creation)
                .filter(Creation.user_id == user_id)
                .order_by(desc(Creation.created_at), desc(Creation.id))
                .all()
            )
            return [CreationRecord.from_row(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list creations for user_id={user_id}: {e}", exc_info=True)
            raise PersistenceError("Failed to load creations") from e
        finally:
            db.close()

    def list_published(self) -> List[CreationRecord]:
        """Public feed, newest first."""
        db = self._session_factory()
        try:
            rows = (
                db.query(Creation)
                .filter(Creation.publish.is_(True))
                .order_by(desc(Creation.created_at), desc(Creation.id))
                .all()
            )
            return [CreationRecord.from_row(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list published creations: {e}", exc_info=True)
            raise PersistenceError("Failed to load creations") from e
        finally:
            db.close()

    def toggle_like(self, creation_id: int, user_id: str) -> bool:
        """
        Flip the user's like on a creation.

        Returns:
            True if the creation is now liked by the user, False if unliked.

        Raises:
            NotFoundError: no creation with that id
        """
        db = self._session_factory()
        try:
            exists = db.query(Creation.id).filter(Creation.id == creation_id).first()
            if not exists:
                raise NotFoundError()

            removed = db.execute(
                delete(CreationLike).where(
                    CreationLike.creation_id == creation_id,
                    CreationLike.user_id == user_id,
                )
            )
            if removed.rowcount:
                db.commit()
                logger.info(f"Creation unliked: id={creation_id}, user_id={user_id}")
                return False

            db.add(CreationLike(creation_id=creation_id, user_id=user_id))
            try:
                db.commit()
            except IntegrityError:
                # Same user toggled concurrently and the like is already present
                db.rollback()
                logger.warning(f"Duplicate like ignored: id={creation_id}, user_id={user_id}")
            logger.info(f"Creation liked: id={creation_id}, user_id={user_id}")
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to toggle like: id={creation_id}, user_id={user_id}: {e}", exc_info=True)
            raise PersistenceError("Failed to update likes") from e
        finally:
            db.close()
