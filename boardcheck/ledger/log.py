"""Append-only verification ledger, storage backends and replay verification."""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Protocol

from dateutil import parser as date_parser
from packaging.version import Version

from .. import POLICY_VERSION
from ..errors import IndexOutOfBounds
from ..policy.codes import DocumentCode, PassengerCategory, coerce_code
from ..policy.engine import Evaluation

logger = logging.getLogger(__name__)


def _dump_canonical(obj: Any) -> bytes:
    return json.dumps(obj, separators=(",", ":"), sort_keys=True).encode("utf-8")


@dataclass(frozen=True)
class VerificationResult:
    """A persisted evaluation outcome. Never mutated once created."""

    can_board: bool
    category: PassengerCategory
    required_documents: tuple[DocumentCode, ...]
    optional_documents: tuple[DocumentCode, ...]
    created_at: datetime
    requester: str

    def __post_init__(self) -> None:
        # Stored and hashed form: tuples of codes and an aware UTC timestamp.
        object.__setattr__(self, "required_documents", tuple(self.required_documents))
        object.__setattr__(self, "optional_documents", tuple(self.optional_documents))
        if self.created_at.tzinfo is None:
            object.__setattr__(self, "created_at", self.created_at.replace(tzinfo=timezone.utc))
        else:
            object.__setattr__(self, "created_at", self.created_at.astimezone(timezone.utc))

    @classmethod
    def from_evaluation(
        cls, evaluation: Evaluation, requester: str, *, created_at: datetime | None = None
    ) -> "VerificationResult":
        return cls(
            can_board=evaluation.can_board,
            category=evaluation.category,
            required_documents=tuple(evaluation.required_documents),
            optional_documents=tuple(evaluation.optional_documents),
            created_at=created_at or datetime.now(timezone.utc),
            requester=requester,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "can_board": self.can_board,
            "category": int(self.category),
            "required_documents": [int(code) for code in self.required_documents],
            "optional_documents": [int(code) for code in self.optional_documents],
            "created_at": self.created_at.isoformat(),
            "requester": self.requester,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VerificationResult":
        created_at_raw = data.get("created_at")
        if not isinstance(created_at_raw, str):
            raise ValueError("Verification result missing created_at timestamp")
        created_at = date_parser.isoparse(created_at_raw)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        requester = data.get("requester")
        if not isinstance(requester, str) or not requester:
            raise ValueError("Verification result missing requester")

        return cls(
            can_board=bool(data["can_board"]),
            category=coerce_code(PassengerCategory, data["category"]),
            required_documents=tuple(coerce_code(DocumentCode, code) for code in data["required_documents"]),
            optional_documents=tuple(coerce_code(DocumentCode, code) for code in data["optional_documents"]),
            created_at=created_at,
            requester=requester,
        )


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """Hash-linked envelope for one appended verification result."""

    sequence: int
    requester: str
    index: int
    policy_version: str
    previous_hash: str | None
    result: VerificationResult

    def payload(self) -> bytes:
        return _dump_canonical(
            {
                "sequence": self.sequence,
                "requester": self.requester,
                "index": self.index,
                "policy_version": self.policy_version,
                "result": self.result.to_dict(),
            }
        )

    def record_hash(self) -> str:
        return hashlib.sha3_256((self.previous_hash or "").encode("utf-8") + self.payload()).hexdigest()

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence": self.sequence,
            "requester": self.requester,
            "index": self.index,
            "policy_version": self.policy_version,
            "previous_hash": self.previous_hash,
            "result": self.result.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LedgerEntry":
        result = data.get("result")
        if not isinstance(result, dict):
            raise ValueError("Ledger entry missing result")
        previous_hash = data.get("previous_hash")
        if previous_hash is not None and not isinstance(previous_hash, str):
            raise ValueError("Invalid previous_hash in ledger entry")
        return cls(
            sequence=int(data["sequence"]),
            requester=str(data["requester"]),
            index=int(data["index"]),
            policy_version=str(data["policy_version"]),
            previous_hash=previous_hash,
            result=VerificationResult.from_dict(result),
        )


class LedgerStore(Protocol):
    """Append-only storage for ledger entries."""

    def append(self, entry: LedgerEntry) -> None:  # pragma: no cover - interface
        ...

    def __iter__(self) -> Iterator[LedgerEntry]:  # pragma: no cover - interface
        ...


class FileLedgerStore:
    """File-backed store using JSON lines."""

    def __init__(self, path: Path):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)

    def append(self, entry: LedgerEntry) -> None:
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(entry.to_dict(), sort_keys=True) + "\n")

    def __iter__(self) -> Iterator[LedgerEntry]:
        with self.path.open("r", encoding="utf-8") as handle:
            for line in handle:
                if not line.strip():
                    continue
                yield LedgerEntry.from_dict(json.loads(line))


class MemoryLedgerStore:
    """In-memory store; the default for a fresh ledger."""

    def __init__(self) -> None:
        self._entries: list[LedgerEntry] = []

    def append(self, entry: LedgerEntry) -> None:
        self._entries.append(entry)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(list(self._entries))


def verify_ledger(store: LedgerStore, *, min_policy_version: str | None = None) -> list[LedgerEntry]:
    """Replay a store verifying sequence, per-requester indices and hash continuity.

    When ``min_policy_version`` is given, entries stamped with an older policy
    version are rejected as well. Raises a :class:`ValueError` on the first
    violation.
    """

    verified: list[LedgerEntry] = []
    counts: dict[str, int] = {}
    previous_hash: str | None = None
    minimum = Version(min_policy_version) if min_policy_version else None

    for entry in store:
        expected_sequence = len(verified)
        if entry.sequence != expected_sequence:
            raise ValueError(f"Unexpected sequence number: {entry.sequence}, expected {expected_sequence}")
        if entry.previous_hash != previous_hash:
            raise ValueError(f"Hash chain continuity violation at sequence {entry.sequence}")
        if entry.result.requester != entry.requester:
            raise ValueError(f"Requester mismatch at sequence {entry.sequence}")

        expected_index = counts.get(entry.requester, 0)
        if entry.index != expected_index:
            raise ValueError(
                "Unexpected index {index} for requester {requester!r}, expected {expected}".format(
                    index=entry.index, requester=entry.requester, expected=expected_index
                )
            )

        if minimum is not None and Version(entry.policy_version) < minimum:
            raise ValueError(
                "Entry {sequence} policy version {version} is below the minimum {minimum}".format(
                    sequence=entry.sequence, version=entry.policy_version, minimum=minimum
                )
            )

        counts[entry.requester] = expected_index + 1
        previous_hash = entry.record_hash()
        verified.append(entry)

    return verified


class VerificationLedger:
    """Per-requester append-only record sequences with a global counter.

    There is no update or delete operation. A ledger opened over a non-empty
    store replays and verifies it first.
    """

    def __init__(self, store: LedgerStore | None = None, *, policy_version: str = POLICY_VERSION):
        self._store: LedgerStore = store if store is not None else MemoryLedgerStore()
        self._policy_version = str(Version(policy_version))
        self._lock = threading.Lock()
        self._records: dict[str, list[VerificationResult]] = {}
        self._entries: list[LedgerEntry] = []
        self._tip: str | None = None

        for entry in verify_ledger(self._store):
            self._apply(entry)
        if self._entries:
            logger.info("Replayed %d ledger entries across %d requesters", len(self._entries), len(self._records))

    def _apply(self, entry: LedgerEntry) -> None:
        self._records.setdefault(entry.requester, []).append(entry.result)
        self._entries.append(entry)
        self._tip = entry.record_hash()

    def record(self, requester: str, result: VerificationResult) -> int:
        """Append ``result`` for ``requester`` and return its per-requester index."""

        if result.requester != requester:
            raise ValueError(
                f"Result requester {result.requester!r} does not match ledger requester {requester!r}"
            )

        with self._lock:
            index = len(self._records.get(requester, ()))
            entry = LedgerEntry(
                sequence=len(self._entries),
                requester=requester,
                index=index,
                policy_version=self._policy_version,
                previous_hash=self._tip,
                result=result,
            )
            self._store.append(entry)
            self._apply(entry)

        logger.debug("Recorded verification %d for %s (sequence %d)", index, requester, entry.sequence)
        return index

    def count(self, requester: str) -> int:
        with self._lock:
            return len(self._records.get(requester, ()))

    def get(self, requester: str, index: int) -> VerificationResult:
        with self._lock:
            records = self._records.get(requester, [])
            if index < 0 or index >= len(records):
                raise IndexOutOfBounds(requester, index, len(records))
            return records[index]

    def global_count(self) -> int:
        with self._lock:
            return len(self._entries)

    def requesters(self) -> list[str]:
        with self._lock:
            return list(self._records)

    def entries(self) -> list[LedgerEntry]:
        with self._lock:
            return list(self._entries)
