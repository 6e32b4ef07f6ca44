"""
Storage gateway for contact records.
"""

from typing import Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateTable

from contact_intake.contacts.models import ContactRecord
from contact_intake.contacts.schemas import ContactCreate
from contact_intake.shared.database import DatabaseManager
from contact_intake.shared.exceptions import SchemaError, StorageUnavailableError
from contact_intake.shared.logging import get_logger

logger = get_logger(__name__)


class StorageGatewayProtocol(Protocol):
    """Protocol for contact storage operations."""

    async def ensure_schema(self, force: bool = False) -> None:
        """Create the contact table if it does not exist."""
        ...

    async def insert(self, record: ContactCreate) -> ContactRecord:
        """Insert one validated record."""
        ...

    async def list_recent(self, limit: int = 10) -> Sequence[ContactRecord]:
        """Most recently inserted records, newest first."""
        ...


class StorageGateway:
    """Provisions the contact table and persists records through a pooled engine."""

    def __init__(self, database: DatabaseManager) -> None:
        """Initialize gateway.

        Args:
            database: Process-scoped database manager owning the pool.
        """
        self._db = database
        self._schema_ready = False

    @property
    def schema_ready(self) -> bool:
        return self._schema_ready

    async def ensure_schema(self, force: bool = False) -> None:
        """Create the contact table if it does not exist.

        The statement uses IF NOT EXISTS so concurrent callers racing on a
        fresh database do not fail. After the first success the check is
        skipped unless ``force`` is set.

        Raises:
            SchemaError: If the table could not be provisioned.
        """
        if self._schema_ready and not force:
            return

        statement = CreateTable(ContactRecord.__table__, if_not_exists=True)
        try:
            async with self._db.engine.begin() as conn:
                await conn.execute(statement)
        except (SQLAlchemyError, OSError) as exc:
            logger.error(
                "Schema provisioning failed",
                extra={"table": ContactRecord.__tablename__, "error": str(exc)},
            )
            raise SchemaError(f"Could not provision table {ContactRecord.__tablename__}") from exc

        self._schema_ready = True
        logger.debug("Schema ensured", extra={"table": ContactRecord.__tablename__})

    async def insert(self, record: ContactCreate) -> ContactRecord:
        """Insert a single validated record in its own transaction.

        Args:
            record: Validated contact fields.

        Returns:
            The stored row with its assigned id and created_at.

        Raises:
            StorageUnavailableError: On connectivity, pool or constraint failure.
        """
        contact = ContactRecord(**record.model_dump())
        try:
            async with self._db.session() as session:
                session.add(contact)
                await session.flush()
                await session.refresh(contact)
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Contact insert failed", extra={"error": str(exc)})
            raise StorageUnavailableError("Could not store contact record") from exc

        logger.info("Contact stored", extra={"contact_id": contact.id})
        return contact

    async def list_recent(self, limit: int = 10) -> Sequence[ContactRecord]:
        """Get up to ``limit`` records ordered by id descending.

        Raises:
            StorageUnavailableError: On connectivity or pool failure.
        """
        stmt = select(ContactRecord).order_by(ContactRecord.id.desc()).limit(limit)
        try:
            async with self._db.session() as session:
                result = await session.execute(stmt)
                return result.scalars().all()
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Contact listing failed", extra={"error": str(exc)})
            raise StorageUnavailableError("Could not read contact records") from exc
