import logging
from typing import List, Sequence

from .errors import AlreadyInitialized, InvalidAdminSet, InvalidQuorum, StoreError
from .store import AuthorityStore

logger = logging.getLogger(__name__)

ADMINS_KEY = "admins"
QUORUM_KEY = "quorum"


class Ledger:
    """Admin set and quorum threshold controlling the vault

    Written once by ``initialize`` and only read afterwards.
    """

    def __init__(self, store: AuthorityStore):
        self.store = store

    @staticmethod
    def validate(admins: Sequence[str], quorum: int) -> None:
        """Check an admin set and quorum without touching the store"""
        if not admins:
            raise InvalidAdminSet()

        seen = set()
        for admin in admins:
            if not isinstance(admin, str) or not admin:
                raise InvalidAdminSet(f"Invalid admin address: {admin!r}")
            if admin in seen:
                raise InvalidAdminSet(f"Duplicate admin address: {admin}")
            seen.add(admin)

        if isinstance(quorum, bool) or not isinstance(quorum, int):
            raise InvalidQuorum(quorum, len(admins))
        if quorum < 1 or quorum > len(admins):
            raise InvalidQuorum(quorum, len(admins))

    def initialize(self, admins: Sequence[str], quorum: int) -> None:
        """Validate and store the admin set and quorum; fails if already set"""
        if self.is_initialized():
            raise AlreadyInitialized()
        self.validate(admins, quorum)

        with self.store.atomic():
            self.store.set(ADMINS_KEY, list(admins))
            self.store.set(QUORUM_KEY, quorum)

        logger.info("Initialized %d admin(s) with quorum %d", len(admins), quorum)

    def is_initialized(self) -> bool:
        """Check if the admin set has been written"""
        return ADMINS_KEY in self.store

    def admins(self) -> List[str]:
        """Admins in the order they were given at initialization"""
        admins = self.store.get(ADMINS_KEY)
        if admins is None:
            raise StoreError("Admin set has not been initialized")
        return admins

    def quorum(self) -> int:
        """Number of distinct approvals needed before release"""
        quorum = self.store.get(QUORUM_KEY)
        if quorum is None:
            raise StoreError("Quorum has not been initialized")
        return quorum

    def is_admin(self, principal: str) -> bool:
        """Check if principal is one of the admins"""
        return principal in self.admins()
