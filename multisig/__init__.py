"""
Multi-Party Vault Multisig - quorum-approved transfers out of a shared fund
"""

from .config import EngineConfig
from .engine import ApprovalEngine, TransferInstruction
from .errors import (
    AlreadyApproved,
    AlreadyInitialized,
    AlreadyReleased,
    InvalidAdminSet,
    InvalidMessage,
    InvalidQuorum,
    MultisigError,
    NonExistentTransaction,
    QuorumNotMet,
    StaleNonce,
    StoreError,
    Unauthorized,
)
from .identity import AdminKey, NonceTracker, normalize_address
from .store import AuthorityStore, JsonFileStore, MemoryStore
from .transactions import Coin, Transaction

__version__ = "0.1.0"
__all__ = [
    "ApprovalEngine",
    "TransferInstruction",
    "EngineConfig",
    "AuthorityStore",
    "MemoryStore",
    "JsonFileStore",
    "AdminKey",
    "NonceTracker",
    "normalize_address",
    "Coin",
    "Transaction",
    "MultisigError",
    "InvalidAdminSet",
    "InvalidQuorum",
    "AlreadyInitialized",
    "Unauthorized",
    "AlreadyApproved",
    "NonExistentTransaction",
    "QuorumNotMet",
    "AlreadyReleased",
    "StaleNonce",
    "StoreError",
    "InvalidMessage",
]
