import json

from .store import AuthorityStore

SIGNED_TX_PREFIX = "signed_tx:"


def approval_key(admin: str, tx_id: int) -> str:
    # JSON keeps the (admin, id) pair unambiguous whatever the admin string holds
    return SIGNED_TX_PREFIX + json.dumps([admin, tx_id])


class ApprovalTracker:
    """Per (admin, transaction id) approval records"""

    def __init__(self, store: AuthorityStore):
        self.store = store

    def has_approved(self, admin: str, tx_id: int) -> bool:
        """Check if admin approved the transaction; missing records read as False"""
        return bool(self.store.get(approval_key(admin, tx_id), False))

    def record_approval(self, admin: str, tx_id: int) -> None:
        """Mark admin as having approved the transaction"""
        self.store.set(approval_key(admin, tx_id), True)
