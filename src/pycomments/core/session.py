"""Per-request session context handed to the comment handler."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    """
    Who is making the request.

    ``user_id`` comes from the authenticated session only. ``client_ip`` and
    ``user_agent`` are what the server saw on the connection.
    """

    user_id: int | None = None
    client_ip: str = ""
    user_agent: str = ""

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None
