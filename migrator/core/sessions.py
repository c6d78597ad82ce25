"""In-memory migration history.

One ``SessionHistory`` lives per browser session (the workspace keeps it in
``st.session_state``), so history is gone once the page is reloaded. Nothing
here is persisted server-side; the relay stays stateless.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator, List, Optional

from pydantic import BaseModel, Field

from migrator.core.prompt import TargetFormat, target_option


PREVIEW_CHARS = 50


class SessionNotFoundError(KeyError):
    pass


class MigrationSession(BaseModel):
    id: str
    timestamp: datetime = Field(default_factory=datetime.now)
    original_code: str
    migrated_code: str
    target_format: TargetFormat
    file_name: Optional[str] = None

    @property
    def line_count(self) -> int:
        return len(self.original_code.split("\n"))

    @property
    def preview(self) -> str:
        return f"{self.original_code[:PREVIEW_CHARS]}..."

    @property
    def label(self) -> str:
        return target_option(self.target_format)["short"]


class SessionHistory:
    """Newest-first list of sessions with a single selected entry."""

    def __init__(self, limit: Optional[int] = None) -> None:
        self.limit = limit if limit and limit > 0 else None
        self._sessions: List[MigrationSession] = []
        self.selected_id: Optional[str] = None

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[MigrationSession]:
        return iter(list(self._sessions))

    def _new_id(self, now: datetime) -> str:
        candidate = int(now.timestamp() * 1000)
        taken = {s.id for s in self._sessions}
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def add(
        self,
        original_code: str,
        migrated_code: str,
        target_format: TargetFormat,
        file_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> MigrationSession:
        now = now or datetime.now()
        session = MigrationSession(
            id=self._new_id(now),
            timestamp=now,
            original_code=original_code,
            migrated_code=migrated_code,
            target_format=target_format,
            file_name=file_name,
        )
        self._sessions.insert(0, session)
        if self.limit is not None:
            del self._sessions[self.limit:]
        self.selected_id = session.id
        return session

    def get(self, session_id: str) -> Optional[MigrationSession]:
        for session in self._sessions:
            if session.id == session_id:
                return session
        return None

    def select(self, session_id: str) -> MigrationSession:
        session = self.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        self.selected_id = session.id
        return session

    @property
    def selected(self) -> Optional[MigrationSession]:
        if self.selected_id is None:
            return None
        return self.get(self.selected_id)

    def delete(self, session_id: str) -> bool:
        before = len(self._sessions)
        self._sessions = [s for s in self._sessions if s.id != session_id]
        if self.selected_id == session_id:
            self.selected_id = None
        return len(self._sessions) != before

    def clear_selection(self) -> None:
        self.selected_id = None

    def clear(self) -> None:
        self._sessions = []
        self.selected_id = None


def format_time(moment: datetime) -> str:
    """12-hour clock without a leading zero, e.g. ``3:05 PM``."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def format_day(moment: datetime, today: Optional[date] = None) -> str:
    today = today or date.today()
    day = moment.date()
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{moment.strftime('%b')} {day.day}"
