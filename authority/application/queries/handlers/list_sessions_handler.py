"""List Sessions handler.

Returns the user's active sessions, most recently active first. The session
matching current_session_id is flagged so clients can label "this device".
"""

from authority.application.dtos import SessionView
from authority.application.queries.auth_queries import ListSessions
from authority.application.services import SessionRegistry
from authority.core.result import Result, Success


class ListSessionsHandler:
    """Handler for list sessions query."""

    def __init__(self, session_registry: SessionRegistry) -> None:
        self._session_registry = session_registry

    async def handle(self, query: ListSessions) -> Result[list[SessionView], None]:
        sessions = await self._session_registry.list_active(query.user_id)
        return Success(
            value=[
                SessionView.from_session(
                    s, is_current=s.session_id == query.current_session_id
                )
                for s in sessions
            ]
        )
