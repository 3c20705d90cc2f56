"""SessionEntry model — one persisted key/value pair of a browser session."""

from __future__ import annotations

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from itqan.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class SessionEntry(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "session_entries"
    __table_args__ = (UniqueConstraint("session_id", "key", name="uq_session_entries_sid_key"),)

    # Opaque id carried by the signed session cookie
    session_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    # "itqan_user" | "itqan_profile_completed" | "itqan_tokens" | "itqan_auth_state"
    key: Mapped[str] = mapped_column(String(64), nullable=False)

    value: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<SessionEntry sid={self.session_id[:8]!r} key={self.key!r}>"
