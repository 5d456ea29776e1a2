from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config import logger
from exceptions import PersistenceException
from models.verdicts import Verdict
from .models import FactCheck

CacheWriteStatus = Literal["inserted", "conflict", "failed"]


@dataclass(frozen=True)
class CacheWriteResult:
    status: CacheWriteStatus
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "inserted"


def _row_to_verdict(row: FactCheck) -> Verdict:
    return {
        "status": row.status,
        "confidence": row.confidence,
        "justification": row.justification,
        "sources": list(row.sources or []),
    }


class CacheStore:
    """
    Fingerprint -> verdict store. The unique ``text_hash`` constraint is the
    only guard against concurrent duplicate inserts: the first writer wins.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def lookup(self, fingerprint: str) -> Optional[Verdict]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(FactCheck).where(FactCheck.text_hash == fingerprint)
                )
                row = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceException("lookup", str(e)) from e

        return _row_to_verdict(row) if row is not None else None

    async def insert(
        self,
        fingerprint: str,
        input_text: str,
        verdict: Verdict,
        audit: Optional[Dict[str, Any]] = None,
    ) -> CacheWriteResult:
        row = FactCheck(
            text_hash=fingerprint,
            input_text=input_text,
            status=verdict["status"],
            confidence=verdict["confidence"],
            justification=verdict["justification"],
            sources=list(verdict["sources"]),
            search_results=audit or {},
        )
        async with self.session_factory() as session:
            try:
                session.add(row)
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if await self._exists(session, fingerprint):
                    logger.info("Cache insert for %s lost to a concurrent writer.", fingerprint)
                    return CacheWriteResult(status="conflict")
                logger.error("Cache insert for %s violated a constraint: %s", fingerprint, e.orig)
                return CacheWriteResult(status="failed", detail=str(e.orig))
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Cache insert for %s failed: %s", fingerprint, e)
                return CacheWriteResult(status="failed", detail=str(e))

        return CacheWriteResult(status="inserted")

    async def _exists(self, session: AsyncSession, fingerprint: str) -> bool:
        try:
            result = await session.execute(
                select(FactCheck.id).where(FactCheck.text_hash == fingerprint)
            )
        except SQLAlchemyError:
            return False
        return result.first() is not None
