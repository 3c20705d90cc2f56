"""Session storage — the persisted side of the session reconciler.

Two implementations share the ``SessionStorage`` protocol:

* ``MemoryStorage`` — a plain dict, used by tests and one-off scripts.
* ``SqlSessionStorage`` — rows of ``session_entries`` scoped to one session id.

Keys are fixed names so that a stored session can be inspected by hand.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from itqan.models.session_entry import SessionEntry

USER_KEY = "itqan_user"
PROFILE_COMPLETED_KEY = "itqan_profile_completed"
TOKENS_KEY = "itqan_tokens"
AUTH_STATE_KEY = "itqan_auth_state"

# Value stored under PROFILE_COMPLETED_KEY once the profile form succeeded
PROFILE_COMPLETED = "1"


@runtime_checkable
class SessionStorage(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage; contents are lost with the object."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)

    def __repr__(self) -> str:
        return f"<MemoryStorage keys={sorted(self.data)}>"


class SqlSessionStorage:
    """Storage backed by the ``session_entries`` table.

    Writes are flushed but not committed; the request-scoped session from
    ``get_db`` commits once the request finishes.
    """

    def __init__(self, db: AsyncSession, session_id: str) -> None:
        self.db = db
        self.session_id = session_id

    async def _entry(self, key: str) -> SessionEntry | None:
        result = await self.db.execute(
            select(SessionEntry).where(
                SessionEntry.session_id == self.session_id,
                SessionEntry.key == key,
            )
        )
        return result.scalar_one_or_none()

    async def get(self, key: str) -> str | None:
        entry = await self._entry(key)
        return entry.value if entry else None

    async def set(self, key: str, value: str) -> None:
        entry = await self._entry(key)
        if entry is None:
            self.db.add(SessionEntry(session_id=self.session_id, key=key, value=value))
        else:
            entry.value = value
        await self.db.flush()

    async def remove(self, key: str) -> None:
        await self.db.execute(
            delete(SessionEntry).where(
                SessionEntry.session_id == self.session_id,
                SessionEntry.key == key,
            )
        )
        await self.db.flush()

    def __repr__(self) -> str:
        return f"<SqlSessionStorage sid={self.session_id[:8]!r}>"
