"""Guard against applying advisory results for superseded input"""

import itertools
from dataclasses import dataclass
from typing import Dict, Hashable, Optional, TypeVar
from fintrack.utils.logging import get_logger
from fintrack.utils.metrics import stale_results_discarded

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ticket:
    """Identity of one in-flight request for a form field"""
    field: str
    key: Hashable
    serial: int


class RequestGuard:
    """
    Tracks the latest request per form field.

    Starting a request for a field supersedes the previous one; results
    that come back for a superseded ticket are dropped.
    """

    def __init__(self):
        self._latest: Dict[str, Ticket] = {}
        self._serials = itertools.count(1)

    def begin(self, field: str, key: Hashable) -> Ticket:
        ticket = Ticket(field=field, key=key, serial=next(self._serials))
        self._latest[field] = ticket
        return ticket

    def is_current(self, ticket: Ticket) -> bool:
        return self._latest.get(ticket.field) == ticket

    def resolve(self, ticket: Ticket, result: T) -> Optional[T]:
        """Return `result` if the ticket is still current, else None"""
        if not self.is_current(ticket):
            stale_results_discarded.labels(field=ticket.field).inc()
            logger.info("Discarding stale advisory result", field=ticket.field, serial=ticket.serial)
            return None
        del self._latest[ticket.field]
        return result

    def finish(self, ticket: Ticket) -> None:
        """Forget a ticket whose request failed, if it is still current"""
        if self.is_current(ticket):
            del self._latest[ticket.field]

    def cancel(self, field: str) -> None:
        self._latest.pop(field, None)

    def pending(self, field: str) -> Optional[Ticket]:
        return self._latest.get(field)
