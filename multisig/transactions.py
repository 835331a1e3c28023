import logging
from dataclasses import dataclass
from typing import List, Optional

from .errors import NonExistentTransaction
from .store import AuthorityStore

logger = logging.getLogger(__name__)

TRANSACTIONS_KEY = "transactions"


@dataclass
class Coin:
    """An amount of a single denomination"""
    denom: str
    amount: int

    def __post_init__(self):
        if not isinstance(self.denom, str) or not self.denom:
            raise ValueError("Coin denomination must be a non-empty string")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValueError(f"Coin amount must be an integer, got {self.amount!r}")
        if self.amount < 0:
            raise ValueError("Coin amount can't be negative")

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"

    def to_dict(self) -> dict:
        """Serialize coin with the amount as a decimal string"""
        return {'denom': self.denom, 'amount': str(self.amount)}

    @classmethod
    def from_dict(cls, data: dict) -> 'Coin':
        amount = data['amount']
        # Amounts travel as decimal strings so large values survive JSON
        if isinstance(amount, str):
            if not (amount.isascii() and amount.isdigit()):
                raise ValueError(f"Invalid coin amount: {amount!r}")
            amount = int(amount)
        return cls(denom=data['denom'], amount=amount)


@dataclass
class Transaction:
    """A proposed transfer out of the vault"""
    id: int
    destination: str
    amounts: List[Coin]
    confirmations: int = 0
    released: bool = False

    def __str__(self) -> str:
        coins = "".join(str(coin) for coin in self.amounts)
        return f"Transaction {{ to: {self.destination}, coin: {coins}, id: {self.id} }}"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'destination': self.destination,
            'amounts': [coin.to_dict() for coin in self.amounts],
            'confirmations': self.confirmations,
            'released': self.released,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Transaction':
        return cls(
            id=data['id'],
            destination=data['destination'],
            amounts=[Coin.from_dict(c) for c in data['amounts']],
            confirmations=data.get('confirmations', 0),
            released=data.get('released', False),
        )


class TransactionRegistry:
    """Append-only sequence of proposed transactions, indexed by id"""

    def __init__(self, store: AuthorityStore):
        self.store = store

    def _load(self) -> List[dict]:
        return self.store.get(TRANSACTIONS_KEY, [])

    def next_id(self) -> int:
        """Id the next appended transaction must carry"""
        return len(self._load())

    def append(self, tx: Transaction) -> None:
        """Store a new transaction whose id must equal next_id()"""
        records = self._load()
        if tx.id != len(records):
            raise ValueError(f"Transaction id {tx.id} is out of sequence, expected {len(records)}")
        records.append(tx.to_dict())
        self.store.set(TRANSACTIONS_KEY, records)
        logger.debug("Stored transaction %d", tx.id)

    def find(self, tx_id: int) -> Optional[Transaction]:
        """Look up a transaction by id, or None if it was never proposed"""
        records = self._load()
        if not isinstance(tx_id, int) or not 0 <= tx_id < len(records):
            return None
        return Transaction.from_dict(records[tx_id])

    def increment_confirmations(self, tx_id: int) -> int:
        """Add one confirmation and return the new count"""
        return self._update(tx_id, 'confirmations', lambda n: n + 1)

    def mark_released(self, tx_id: int) -> None:
        """Flag a transaction as released"""
        self._update(tx_id, 'released', lambda _: True)

    def _update(self, tx_id: int, name: str, change):
        records = self._load()
        if not isinstance(tx_id, int) or not 0 <= tx_id < len(records):
            raise NonExistentTransaction(tx_id)
        records[tx_id][name] = change(records[tx_id][name])
        self.store.set(TRANSACTIONS_KEY, records)
        return records[tx_id][name]

    def all(self) -> List[Transaction]:
        """Every transaction in id order, released ones included"""
        return [Transaction.from_dict(record) for record in self._load()]
