"""
Event view-model used by every screen that shows an event.

Instead of each screen deciding what to render from which props it was
given, the capabilities are computed once from the event and the session.
"""

from dataclasses import dataclass
from typing import Dict, Any, List

from client.session import Session


@dataclass(frozen=True)
class EventView:
    event: Dict[str, Any]
    has_joined: bool
    can_edit: bool
    can_join: bool
    can_leave: bool

    @property
    def id(self):
        return self.event.get("id")

    @property
    def title(self) -> str:
        return self.event.get("title", "")

    @property
    def attendee_count(self) -> int:
        return len(self.event.get("joined") or [])

    @classmethod
    def from_event(cls, event: Dict[str, Any], session: Session) -> "EventView":
        email = session.email if session.is_authenticated else None
        has_joined = bool(email) and email in (event.get("joined") or [])

        return cls(
            event=event,
            has_joined=has_joined,
            can_edit=bool(email) and event.get("createdBy") == email,
            can_join=bool(email) and not has_joined,
            can_leave=has_joined,
        )


def build_event_views(events: List[Dict[str, Any]], session: Session) -> List[EventView]:
    return [EventView.from_event(event, session) for event in events]
