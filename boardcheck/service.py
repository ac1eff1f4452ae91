"""Read-only and recording entry points over the policy engine and ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .ledger import VerificationLedger, VerificationResult
from .notifications import EvaluationCompleted, MinorAlert, Notification, NotificationHub
from .policy import Evaluation, PassengerCategory, PassengerInput, evaluate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordedVerification:
    """Result of the write path: the stored result, its index and what was published."""

    index: int
    result: VerificationResult
    notifications: tuple[Notification, ...] = field(default_factory=tuple)


class BoardingVerifier:
    """Evaluate passengers and record the outcomes per requester."""

    def __init__(
        self,
        ledger: VerificationLedger | None = None,
        hub: NotificationHub | None = None,
    ):
        self.ledger = ledger if ledger is not None else VerificationLedger()
        self.hub = hub if hub is not None else NotificationHub()

    def evaluate(self, passenger: PassengerInput) -> Evaluation:
        """Evaluate without recording anything."""

        return evaluate(passenger)

    def verify(
        self, requester: str, passenger: PassengerInput, *, now: datetime | None = None
    ) -> RecordedVerification:
        """Evaluate ``passenger``, record the outcome for ``requester`` and notify.

        Invalid input raises before the ledger is touched.
        """

        evaluation = evaluate(passenger)
        timestamp = now or datetime.now(timezone.utc)
        result = VerificationResult.from_evaluation(evaluation, requester, created_at=timestamp)
        index = self.ledger.record(requester, result)
        logger.info(
            "Verification %d recorded for %s: category=%s can_board=%s",
            index,
            requester,
            result.category.name,
            result.can_board,
        )

        notifications: list[Notification] = [
            EvaluationCompleted(
                requester=requester,
                category=result.category,
                can_board=result.can_board,
                timestamp=result.created_at,
            )
        ]
        if result.category == PassengerCategory.MINOR_CITIZEN:
            notifications.append(
                MinorAlert(
                    requester=requester,
                    age=passenger.age,
                    companion=passenger.companion,
                    can_board=result.can_board,
                    timestamp=result.created_at,
                )
            )
        for notification in notifications:
            self.hub.publish(notification)

        return RecordedVerification(index=index, result=result, notifications=tuple(notifications))
