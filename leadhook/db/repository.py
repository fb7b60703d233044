from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from leadhook.db.models import SeenCall


async def try_claim_call(session: AsyncSession, call_id: str) -> bool:
    """
    Atomically insert a call id.
    Returns True if created, False if the id was already recorded.
    """
    try:
        session.add(SeenCall(call_id=call_id))
        await session.flush()
        return True
    except IntegrityError:
        await session.rollback()
        return False


async def release_call(session: AsyncSession, call_id: str) -> None:
    """Forget a call id (after a failed append, so a resend can be written)."""
    await session.execute(delete(SeenCall).where(SeenCall.call_id == call_id))
    await session.flush()


async def call_seen(session: AsyncSession, call_id: str) -> bool:
    stmt = select(SeenCall.call_id).where(SeenCall.call_id == call_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none() is not None
