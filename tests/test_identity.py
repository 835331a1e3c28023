import unittest
from multisig.errors import StaleNonce
from multisig.identity import AdminKey, NonceTracker, normalize_address, signing_payload
from multisig.store import MemoryStore

class TestAdminKey(unittest.TestCase):

    def setUp(self):
        self.key = AdminKey()

    def test_address_is_compressed_pubkey(self):
        address = self.key.address
        self.assertEqual(len(address), 66)
        self.assertIn(address[:2], ("02", "03"))

    def test_sign_and_verify(self):
        signature = self.key.sign_message(b"payload")
        self.assertTrue(AdminKey.verify_signature(b"payload", signature, self.key.address))
        self.assertFalse(AdminKey.verify_signature(b"tampered", signature, self.key.address))

    def test_wrong_key(self):
        signature = self.key.sign_message(b"payload")
        other = AdminKey()
        self.assertFalse(AdminKey.verify_signature(b"payload", signature, other.address))

    def test_malformed_input(self):
        self.assertFalse(AdminKey.verify_signature(b"payload", "zz", self.key.address))
        self.assertFalse(AdminKey.verify_signature(b"payload", "00" * 64, "not-hex"))
        self.assertFalse(AdminKey.verify_signature(b"payload", "00" * 64, "02" + "00" * 10))

    def test_key_round_trip(self):
        private_hex, address = AdminKey.generate_key_pair()
        self.assertEqual(AdminKey.from_hex(private_hex).address, address)

    def test_normalize_address(self):
        uncompressed = "04" + self.key.public_key.to_string().hex()
        raw = self.key.public_key.to_string().hex()

        for encoding in (self.key.address, self.key.address.upper(), uncompressed, uncompressed.upper(), raw):
            self.assertEqual(normalize_address(encoding), self.key.address)

    def test_normalize_rejects_non_keys(self):
        for value in ("owner1", "", "02" + "00" * 10, None):
            with self.assertRaises(ValueError):
                normalize_address(value)

    def test_request_signature_binds_chain_and_nonce(self):
        body = b'{"approve": {"id": 0}}'
        signature = self.key.sign_request("vault-a", 4, body)

        self.assertTrue(AdminKey.verify_signature(signing_payload("vault-a", 4, body), signature, self.key.address))
        self.assertFalse(AdminKey.verify_signature(signing_payload("vault-b", 4, body), signature, self.key.address))
        self.assertFalse(AdminKey.verify_signature(signing_payload("vault-a", 5, body), signature, self.key.address))
        self.assertFalse(AdminKey.verify_signature(body, signature, self.key.address))

class TestNonceTracker(unittest.TestCase):

    def setUp(self):
        self.nonces = NonceTracker(MemoryStore())

    def test_nonces_strictly_increase(self):
        self.assertEqual(self.nonces.last_nonce("admin"), -1)

        self.nonces.consume("admin", 0)
        self.nonces.consume("admin", 5)
        self.assertEqual(self.nonces.last_nonce("admin"), 5)

        for stale in (5, 3):
            with self.assertRaises(StaleNonce):
                self.nonces.consume("admin", stale)
        self.assertEqual(self.nonces.last_nonce("admin"), 5)

    def test_nonces_are_per_admin(self):
        self.nonces.consume("admin1", 3)
        self.nonces.consume("admin2", 1)
        self.assertEqual(self.nonces.last_nonce("admin1"), 3)
        self.assertEqual(self.nonces.last_nonce("admin2"), 1)

if __name__ == '__main__':
    unittest.main()
