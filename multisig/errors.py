"""
Error taxonomy for the multisig vault
"""

from typing import Optional


class MultisigError(Exception):
    """Base class for every error raised by the multisig package"""


class SetupError(MultisigError):
    """Initialization failed; nothing was committed"""


class InvalidAdminSet(SetupError):
    def __init__(self, reason: str = "Number of owners can't be 0"):
        super().__init__(reason)


class InvalidQuorum(SetupError):
    def __init__(self, quorum: int, owners: int):
        self.quorum = quorum
        self.owners = owners
        if quorum == 0:
            message = "Quorum can't be 0"
        elif isinstance(quorum, int) and quorum < 0:
            message = f"Quorum must be positive, got {quorum}"
        else:
            message = f"Quorum: {quorum} is more than the number of owners: {owners}"
        super().__init__(message)


class AlreadyInitialized(SetupError):
    def __init__(self):
        super().__init__("Admin set and quorum are already initialized")


class AuthorizationError(MultisigError):
    """The caller may not perform the request"""


class Unauthorized(AuthorizationError):
    def __init__(self, caller: Optional[str] = None):
        self.caller = caller
        super().__init__("Unauthorized")


class StaleNonce(AuthorizationError):
    """A signed request reused a nonce that was already consumed"""

    def __init__(self, nonce: int, last_nonce: int):
        self.nonce = nonce
        self.last_nonce = last_nonce
        super().__init__(f"Nonce {nonce} was already used, expected more than {last_nonce}")


class ProtocolError(MultisigError):
    """Caller-visible rejection of a well-formed request; no state was changed"""


class AlreadyApproved(ProtocolError):
    def __init__(self, tx_id: int):
        self.tx_id = tx_id
        super().__init__(f"You already signed transaction with id: {tx_id}")


class NonExistentTransaction(ProtocolError):
    def __init__(self, tx_id: int):
        self.tx_id = tx_id
        super().__init__(f"Transaction with tx_id: {tx_id}, doesn't exist")


class QuorumNotMet(ProtocolError):
    def __init__(self, quorum: int, confirmations: int):
        self.quorum = quorum
        self.confirmations = confirmations
        super().__init__(
            f"Not enough admins signed this transaction, the quorum is {quorum} "
            f"and only {confirmations} signed the transaction"
        )


class AlreadyReleased(ProtocolError):
    def __init__(self, tx_id: int):
        self.tx_id = tx_id
        super().__init__(f"Transaction with tx_id: {tx_id} was already released")


class StoreError(MultisigError):
    """The backing store failed to read or write"""


class InvalidMessage(MultisigError, ValueError):
    """A request payload could not be decoded into a message"""
