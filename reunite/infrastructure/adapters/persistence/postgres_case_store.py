"""PostgreSQL case store.

Production implementation of CaseStoreProtocol on SQLAlchemy async
sessions (asyncpg driver). compare_and_swap runs read-validate-write in
one transaction holding the row lock:

    SELECT ... FROM verification_cases WHERE id = :id FOR UPDATE
    -- projection version check + mutator, in Python
    UPDATE verification_cases SET ... WHERE id = :id

The version rule is shared with the in-memory stub through
``swap_projection``.

Schema: migrations/001_create_verification_cases.sql
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from reunite.application.ports.case_store import CaseStoreProtocol
from reunite.application.ports.time_authority import TimeAuthorityProtocol
from reunite.domain.errors.case import CaseAlreadyExistsError, CaseNotFoundError
from reunite.domain.models.identity import normalize_email
from reunite.domain.models.verification_case import CaseStatus, VerificationCase
from reunite.domain.services.case_versioning import (
    CaseMutator,
    CaseProjection,
    swap_projection,
)
from reunite.infrastructure.adapters.persistence.case_codec import (
    case_from_row,
    case_to_params,
)

logger = get_logger()

_COLUMNS = """
    id, listing_id, finder_email, claimant_email, verification_method,
    status, document, version, workflow_version, chat_version,
    created_at, updated_at
"""

_INSERT = f"""
    INSERT INTO verification_cases ({_COLUMNS})
    VALUES (
        :id, :listing_id, :finder_email, :claimant_email,
        :verification_method, :status, CAST(:document AS JSONB),
        :version, :workflow_version, :chat_version,
        :created_at, :updated_at
    )
"""

# Matches the partial unique index uq_verification_cases_open_claim
_OPEN_CLAIM = "listing_id IS NOT NULL AND status NOT IN ('VERIFIED', 'RESOLVED')"


class PostgresCaseStore(CaseStoreProtocol):
    """PostgreSQL implementation of CaseStoreProtocol.

    Attributes:
        _session_factory: SQLAlchemy async session factory for DB access.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._session_factory = session_factory
        self._time = time_authority

    async def create(self, case: VerificationCase) -> UUID:
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(text(_INSERT), case_to_params(case))
        except IntegrityError as e:
            raise CaseAlreadyExistsError(case.id) from e
        logger.debug("case_inserted", case_id=str(case.id))
        return case.id

    async def get(self, case_id: UUID) -> VerificationCase:
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"SELECT {_COLUMNS} FROM verification_cases WHERE id = :id"),
                {"id": case_id},
            )
            row = result.mappings().first()
        if row is None:
            raise CaseNotFoundError(case_id)
        return case_from_row(row)

    async def compare_and_swap(
        self,
        case_id: UUID,
        expected_version: int,
        mutator: CaseMutator,
        projection: CaseProjection = CaseProjection.WORKFLOW,
    ) -> VerificationCase:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text(f"""
                    SELECT {_COLUMNS}
                    FROM verification_cases
                    WHERE id = :id
                    FOR UPDATE
                """),
                {"id": case_id},
            )
            row = result.mappings().first()
            if row is None:
                raise CaseNotFoundError(case_id)

            updated = swap_projection(
                case_from_row(row),
                expected_version,
                mutator,
                projection,
                self._time.now(),
                operation=f"{projection.value}_update",
            )
            params = case_to_params(updated)
            await session.execute(
                text("""
                    UPDATE verification_cases
                    SET status = :status,
                        document = CAST(:document AS JSONB),
                        version = :version,
                        workflow_version = :workflow_version,
                        chat_version = :chat_version,
                        updated_at = :updated_at
                    WHERE id = :id
                """),
                {
                    "id": params["id"],
                    "status": params["status"],
                    "document": params["document"],
                    "version": params["version"],
                    "workflow_version": params["workflow_version"],
                    "chat_version": params["chat_version"],
                    "updated_at": params["updated_at"],
                },
            )
        return updated

    async def list_for_party(
        self,
        email: str,
        status: CaseStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[VerificationCase], int]:
        params: dict[str, object] = {
            "email": normalize_email(email),
            "limit": limit,
            "offset": offset,
        }
        where = "WHERE (finder_email = :email OR claimant_email = :email)"
        if status is not None:
            where += " AND status = :status"
            params["status"] = status.value
        async with self._session_factory() as session:
            total = (
                await session.execute(
                    text(f"SELECT COUNT(*) FROM verification_cases {where}"), params
                )
            ).scalar() or 0
            result = await session.execute(
                text(f"""
                    SELECT {_COLUMNS} FROM verification_cases {where}
                    ORDER BY created_at DESC
                    LIMIT :limit OFFSET :offset
                """),
                params,
            )
            rows = result.mappings().all()
        return [case_from_row(r) for r in rows], total

    async def list_by_status(
        self,
        status: CaseStatus,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[VerificationCase], int]:
        params = {"status": status.value, "limit": limit, "offset": offset}
        async with self._session_factory() as session:
            total = (
                await session.execute(
                    text(
                        "SELECT COUNT(*) FROM verification_cases WHERE status = :status"
                    ),
                    params,
                )
            ).scalar() or 0
            result = await session.execute(
                text(f"""
                    SELECT {_COLUMNS} FROM verification_cases
                    WHERE status = :status
                    ORDER BY created_at ASC
                    LIMIT :limit OFFSET :offset
                """),
                params,
            )
            rows = result.mappings().all()
        return [case_from_row(r) for r in rows], total

    async def create_unless_open(
        self, case: VerificationCase
    ) -> tuple[VerificationCase, bool]:
        """Insert unless the claimant already has an open case for the listing.

        The partial unique index on (listing_id, claimant_email) makes the
        insert a no-op when an open case exists; the existing row is then
        read back. If that case closes before the read, the insert is
        attempted again.
        """
        if case.pet.listing_id is None:
            await self.create(case)
            return case, True

        while True:
            try:
                async with self._session_factory() as session, session.begin():
                    inserted = await session.execute(
                        text(f"""
                            {_INSERT}
                            ON CONFLICT (listing_id, claimant_email)
                                WHERE {_OPEN_CLAIM}
                            DO NOTHING
                            RETURNING id
                        """),
                        case_to_params(case),
                    )
                    if inserted.first() is not None:
                        logger.debug("case_inserted", case_id=str(case.id))
                        return case, True
                    result = await session.execute(
                        text(f"""
                            SELECT {_COLUMNS} FROM verification_cases
                            WHERE listing_id = :listing_id
                              AND claimant_email = :claimant_email
                              AND {_OPEN_CLAIM}
                        """),
                        {
                            "listing_id": case.pet.listing_id,
                            "claimant_email": normalize_email(case.claimant.email),
                        },
                    )
                    row = result.mappings().first()
            except IntegrityError as e:
                raise CaseAlreadyExistsError(case.id) from e
            if row is not None:
                return case_from_row(row), False
            logger.debug(
                "open_case_closed_during_intake",
                listing_id=case.pet.listing_id,
            )
