"""
Approval engine: propose, approve and release transfers out of the vault

Each operation checks the caller against the ledger, validates everything it
needs, and only then writes. All operations are serialized on one lock, and
the writes of a single operation are committed together.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .approvals import ApprovalTracker
from .config import EngineConfig
from .errors import (
    AlreadyApproved,
    AlreadyReleased,
    NonExistentTransaction,
    QuorumNotMet,
    Unauthorized,
)
from .ledger import Ledger
from .store import AuthorityStore
from .transactions import Coin, Transaction, TransactionRegistry

logger = logging.getLogger(__name__)


@dataclass
class TransferInstruction:
    """Instruction for the host to move funds; the engine never moves value itself"""
    destination: str
    amounts: List[Coin]

    def to_dict(self) -> dict:
        return {
            'destination': self.destination,
            'amounts': [coin.to_dict() for coin in self.amounts],
        }


class ApprovalEngine:
    """Coordinates the ledger, transaction registry and approval tracker"""

    def __init__(self, store: AuthorityStore, config: Optional[EngineConfig] = None):
        self.store = store
        self.config = config or EngineConfig.reference()
        self.ledger = Ledger(store)
        self.registry = TransactionRegistry(store)
        self.tracker = ApprovalTracker(store)
        self._lock = threading.RLock()

    @contextmanager
    def serialized(self):
        """Hold the engine lock so callers can chain extra checks with one operation"""
        with self._lock:
            yield self

    def initialize(self, admins: Sequence[str], quorum: int) -> None:
        """Set the admin set and quorum once"""
        with self._lock:
            self.ledger.initialize(admins, quorum)

    def _require_admin(self, caller: str, action: str) -> None:
        if not self.ledger.is_admin(caller):
            logger.warning("Rejected %s from non-admin %s", action, caller)
            raise Unauthorized(caller)

    def propose(self, caller: str, destination: str, amounts: Sequence[Coin]) -> Transaction:
        """Propose a transfer; the proposer's approval is counted immediately"""
        with self._lock, self.store.atomic():
            self._require_admin(caller, "propose")

            tx = Transaction(
                id=self.registry.next_id(),
                destination=destination,
                amounts=list(amounts),
                confirmations=1,
            )
            self.registry.append(tx)
            self.tracker.record_approval(caller, tx.id)

        logger.info("%s proposed %s", caller, tx)
        return tx

    def approve(self, caller: str, tx_id: int) -> None:
        """Count caller's approval of a transaction, at most once per admin"""
        with self._lock, self.store.atomic():
            self._require_admin(caller, "approve")

            if self.tracker.has_approved(caller, tx_id):
                raise AlreadyApproved(tx_id)
            if self.registry.find(tx_id) is None:
                raise NonExistentTransaction(tx_id)

            # Approval record and confirmation count move together
            self.tracker.record_approval(caller, tx_id)
            confirmations = self.registry.increment_confirmations(tx_id)

        logger.info("%s approved transaction %d (%d confirmation(s))", caller, tx_id, confirmations)

    def release(self, caller: str, tx_id: int) -> TransferInstruction:
        """Emit the transfer instruction of a transaction that reached quorum

        Any admin may release, whether or not they approved. Unless release
        tracking is enabled, releasing again re-emits the same instruction.
        """
        with self._lock, self.store.atomic():
            self._require_admin(caller, "release")

            tx = self.registry.find(tx_id)
            if tx is None:
                raise NonExistentTransaction(tx_id)

            quorum = self.ledger.quorum()
            if tx.confirmations < quorum:
                raise QuorumNotMet(quorum, tx.confirmations)

            if self.config.track_released:
                if tx.released:
                    raise AlreadyReleased(tx_id)
                self.registry.mark_released(tx_id)

        logger.info("%s released transaction %d to %s", caller, tx_id, tx.destination)
        return TransferInstruction(destination=tx.destination, amounts=tx.amounts)

    def is_initialized(self) -> bool:
        with self._lock:
            return self.ledger.is_initialized()

    def list_admins(self) -> List[str]:
        with self._lock:
            return self.ledger.admins()

    def list_transactions(self) -> List[Transaction]:
        with self._lock:
            return self.registry.all()

    def has_approved(self, admin: str, tx_id: int) -> bool:
        """Whether admin approved the transaction; unknown pairs read as False"""
        with self._lock:
            return self.tracker.has_approved(admin, tx_id)
