import unittest
from multisig.errors import AlreadyInitialized, InvalidAdminSet, InvalidQuorum
from multisig.ledger import Ledger
from multisig.store import MemoryStore

class TestLedger(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.store = MemoryStore()
        self.ledger = Ledger(self.store)

    def test_initialize(self):
        """Test admin set and quorum are stored"""
        self.ledger.initialize(["owner1", "owner2", "owner3"], 2)

        self.assertEqual(self.ledger.admins(), ["owner1", "owner2", "owner3"])
        self.assertEqual(self.ledger.quorum(), 2)
        self.assertTrue(self.ledger.is_admin("owner2"))
        self.assertFalse(self.ledger.is_admin("intruder"))

    def test_quorum_bounds(self):
        """Initialization succeeds iff 1 <= quorum <= len(admins)"""
        for size in range(1, 5):
            admins = [f"owner{i}" for i in range(size)]
            for quorum in range(0, size + 3):
                ledger = Ledger(MemoryStore())
                if 1 <= quorum <= size:
                    ledger.initialize(admins, quorum)
                    self.assertEqual(ledger.quorum(), quorum)
                else:
                    with self.assertRaises(InvalidQuorum):
                        ledger.initialize(admins, quorum)
                    self.assertFalse(ledger.is_initialized())

    def test_empty_admin_set(self):
        with self.assertRaises(InvalidAdminSet) as ctx:
            self.ledger.initialize([], 1)
        self.assertEqual(str(ctx.exception), "Number of owners can't be 0")
        self.assertEqual(self.store.snapshot(), {})

    def test_duplicate_admins(self):
        with self.assertRaises(InvalidAdminSet):
            self.ledger.initialize(["owner1", "owner1"], 1)
        self.assertFalse(self.ledger.is_initialized())

    def test_quorum_error_message(self):
        with self.assertRaises(InvalidQuorum) as ctx:
            self.ledger.initialize(["owner1", "owner2"], 3)
        self.assertEqual(str(ctx.exception), "Quorum: 3 is more than the number of owners: 2")

    def test_immutable_after_initialize(self):
        self.ledger.initialize(["owner1"], 1)

        with self.assertRaises(AlreadyInitialized):
            self.ledger.initialize(["owner2", "owner3"], 2)

        self.assertEqual(self.ledger.admins(), ["owner1"])
        self.assertEqual(self.ledger.quorum(), 1)

if __name__ == '__main__':
    unittest.main()
