"""
Admin key management: secp256k1 keys whose compressed public key is the
admin address, signed request payloads, and per-admin replay protection
"""

import hashlib
import json
from typing import Optional, Tuple

from ecdsa import SECP256k1, BadSignatureError, MalformedPointError, SigningKey, VerifyingKey

from .errors import StaleNonce
from .store import AuthorityStore

NONCE_PREFIX = "nonce:"


def normalize_address(pubkey_hex: str) -> str:
    """Canonical address for a public key in any hex encoding

    Compressed, uncompressed and raw keys, in either letter case, all map to
    the lowercase compressed form. Raises ValueError on anything that is not
    a valid secp256k1 point.
    """
    if not isinstance(pubkey_hex, str):
        raise ValueError(f"Public key must be a hex string, got {pubkey_hex!r}")
    try:
        vk = VerifyingKey.from_string(bytes.fromhex(pubkey_hex), curve=SECP256k1)
    except MalformedPointError as e:
        raise ValueError(f"Invalid public key: {e}") from e
    return vk.to_string("compressed").hex()


def signing_payload(chain_id: str, nonce: int, body: bytes) -> bytes:
    """Bytes an admin signs: the vault instance, the request nonce and the body"""
    return f"{chain_id}\n{nonce}\n".encode("utf-8") + body


class AdminKey:
    """secp256k1 key pair identifying one admin"""

    def __init__(self, private_key: Optional[bytes] = None):
        if private_key:
            self.private_key = SigningKey.from_string(private_key, curve=SECP256k1)
        else:
            self.private_key = SigningKey.generate(curve=SECP256k1)

        self.public_key = self.private_key.get_verifying_key()

    @classmethod
    def from_hex(cls, private_key_hex: str) -> 'AdminKey':
        """Load a key from its hex private scalar"""
        return cls(bytes.fromhex(private_key_hex))

    @property
    def address(self) -> str:
        """Compressed public key in hex; this is the admin's principal"""
        return self.public_key.to_string("compressed").hex()

    def sign_message(self, message: bytes) -> str:
        """Sign message with SHA-256 ECDSA and return the signature in hex"""
        return self.private_key.sign(message, hashfunc=hashlib.sha256).hex()

    def sign_request(self, chain_id: str, nonce: int, body: bytes) -> str:
        """Sign a request body for one vault instance under a fresh nonce"""
        return self.sign_message(signing_payload(chain_id, nonce, body))

    @staticmethod
    def verify_signature(message: bytes, signature_hex: str, pubkey_hex: str) -> bool:
        """Check a signature against a hex public key (compressed or uncompressed)"""
        try:
            vk = VerifyingKey.from_string(bytes.fromhex(pubkey_hex), curve=SECP256k1)
            return vk.verify(bytes.fromhex(signature_hex), message, hashfunc=hashlib.sha256)
        except (BadSignatureError, MalformedPointError, ValueError, TypeError):
            return False

    @staticmethod
    def generate_key_pair() -> Tuple[str, str]:
        """Generate new key pair and return (private_key_hex, address)"""
        key = AdminKey()
        return key.private_key.to_string().hex(), key.address


class NonceTracker:
    """Highest nonce consumed by each admin; nonces must strictly increase"""

    def __init__(self, store: AuthorityStore):
        self.store = store

    @staticmethod
    def _key(address: str) -> str:
        return NONCE_PREFIX + json.dumps(address)

    def last_nonce(self, address: str) -> int:
        """Last consumed nonce, or -1 if the admin never sent a request"""
        return self.store.get(self._key(address), -1)

    def consume(self, address: str, nonce: int) -> None:
        last = self.last_nonce(address)
        if nonce <= last:
            raise StaleNonce(nonce, last)
        self.store.set(self._key(address), nonce)
