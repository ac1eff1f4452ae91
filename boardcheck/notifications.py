"""Notifications published after a verification is recorded.

Delivery is synchronous and happens only after the ledger write succeeds.
Subscribers can listen to every notification or only to specific kinds, so a
monitor interested in minors does not have to inspect every evaluation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Type, Union

from .policy.codes import CompanionType, PassengerCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationCompleted:
    """Emitted for every recorded verification."""

    requester: str
    category: PassengerCategory
    can_board: bool
    timestamp: datetime

    kind = "evaluation.completed"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "requester": self.requester,
            "category": int(self.category),
            "can_board": self.can_board,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class MinorAlert:
    """Emitted in addition to :class:`EvaluationCompleted` for minor citizens."""

    requester: str
    age: int
    companion: CompanionType
    can_board: bool
    timestamp: datetime

    kind = "evaluation.minor_alert"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "requester": self.requester,
            "age": self.age,
            "companion": int(self.companion),
            "can_board": self.can_board,
            "timestamp": self.timestamp.isoformat(),
        }


Notification = Union[EvaluationCompleted, MinorAlert]
Handler = Callable[[Notification], None]


class NotificationHub:
    """Fan notifications out to registered handlers."""

    def __init__(self) -> None:
        self._subscribers: list[tuple[Handler, tuple[Type[Any], ...] | None]] = []

    def subscribe(
        self, handler: Handler, kinds: Iterable[Type[Any]] | None = None
    ) -> Callable[[], None]:
        """Register ``handler``; returns a callable that removes it again."""

        entry = (handler, tuple(kinds) if kinds is not None else None)
        self._subscribers.append(entry)

        def unsubscribe() -> None:
            if entry in self._subscribers:
                self._subscribers.remove(entry)

        return unsubscribe

    def publish(self, notification: Notification) -> int:
        """Deliver ``notification`` and return how many handlers received it.

        A failing handler is logged and skipped; it never affects the record
        that triggered the notification.
        """

        delivered = 0
        for handler, kinds in list(self._subscribers):
            if kinds is not None and not isinstance(notification, kinds):
                continue
            try:
                handler(notification)
            except Exception:
                logger.exception("Notification handler %r failed for %s", handler, notification.kind)
                continue
            delivered += 1
        return delivered
