"""
Proof store for credproof.

In-memory map from proof reference to the claim record it was minted for.
The store is a cache: it does not survive a restart, and callers must
always be able to fall back to decode_proof() on a miss.
"""

import logging
import threading
from typing import Dict, List, Optional, Tuple

from credproof.core.models import ClaimRecord

logger = logging.getLogger(__name__)


class ProofStore:
    """
    Process-scoped proof cache.

    Constructed explicitly and passed to whoever needs it; there is no
    module-level instance.

    Thread-safe via internal lock. Records are immutable, so a reader
    racing a writer on the same key sees either the old or the new
    record, never a partial one.
    """

    def __init__(self) -> None:
        self._lock:    threading.Lock          = threading.Lock()
        self._entries: Dict[str, ClaimRecord] = {}

    # ── Public API ────────────────────────────────────────────

    def put(self, reference: str, record: ClaimRecord) -> None:
        """Store a record under its reference. Last write wins."""
        with self._lock:
            self._entries[reference] = record
            total = len(self._entries)
        logger.debug("Stored proof %s (total proofs: %d)", reference, total)

    def get(self, reference: str) -> Optional[ClaimRecord]:
        """Return the record stored under reference, or None."""
        with self._lock:
            record = self._entries.get(reference)
            total = len(self._entries)
        logger.debug(
            "Retrieved proof %s found=%s (total proofs: %d)",
            reference, record is not None, total,
        )
        return record

    def list(self) -> List[Tuple[str, ClaimRecord]]:
        """
        Snapshot of all (reference, record) pairs.

        For administrative enumeration only; ordering across concurrent
        writers is not guaranteed.
        """
        with self._lock:
            return list(self._entries.items())

    def get_stats(self) -> dict:
        """Get store statistics"""
        type_counts: Dict[str, int] = {}
        for _, record in self.list():
            type_counts[record.claim_type] = type_counts.get(record.claim_type, 0) + 1

        return {
            "total_proofs": sum(type_counts.values()),
            "by_claim_type": type_counts,
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, reference: object) -> bool:
        with self._lock:
            return reference in self._entries

    def __repr__(self) -> str:
        return f"ProofStore(proofs={len(self)})"
