"""
Request messages and query responses

Each direction is a closed set of variants. On the wire a message is a JSON
object with a single key naming the variant, e.g. ``{"approve": {"id": 0}}``.
"""

from dataclasses import dataclass
from typing import List, Union

from .errors import InvalidMessage
from .transactions import Coin, Transaction


@dataclass
class InstantiateMsg:
    admins: List[str]
    quorum: int

    @classmethod
    def from_dict(cls, data: dict) -> 'InstantiateMsg':
        if not isinstance(data, dict):
            raise InvalidMessage("Instantiate message must be an object")
        admins = data.get('admins')
        quorum = data.get('quorum')
        if not isinstance(admins, list):
            raise InvalidMessage("'admins' must be a list of addresses")
        if isinstance(quorum, bool) or not isinstance(quorum, int):
            raise InvalidMessage("'quorum' must be an integer")
        return cls(admins=admins, quorum=quorum)


@dataclass
class Propose:
    destination: str
    amounts: List[Coin]


@dataclass
class Approve:
    id: int


@dataclass
class Release:
    id: int


ExecuteMsg = Union[Propose, Approve, Release]


@dataclass
class ListAdmins:
    pass


@dataclass
class ListTransactions:
    pass


@dataclass
class ListApproval:
    admin: str
    id: int


QueryMsg = Union[ListAdmins, ListTransactions, ListApproval]


@dataclass
class ListAdminsResp:
    admins: List[str]

    def to_dict(self) -> dict:
        return {'admins': list(self.admins)}


@dataclass
class ListTransactionsResp:
    transactions: List[Transaction]

    def to_dict(self) -> dict:
        return {'transactions': [tx.to_dict() for tx in self.transactions]}


@dataclass
class ListApprovalResp:
    approved: bool

    def to_dict(self) -> dict:
        return {'approved': self.approved}


def _unwrap(data, variants):
    if not isinstance(data, dict) or len(data) != 1:
        raise InvalidMessage("Message must be an object with exactly one variant key")
    (name, body), = data.items()
    if name not in variants:
        raise InvalidMessage(f"Unknown message variant: {name}")
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise InvalidMessage(f"Body of '{name}' must be an object")
    return name, body


def _tx_id(body: dict) -> int:
    tx_id = body.get('id')
    if isinstance(tx_id, bool) or not isinstance(tx_id, int) or tx_id < 0:
        raise InvalidMessage("'id' must be a non-negative integer")
    return tx_id


def _address(body: dict, key: str) -> str:
    value = body.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidMessage(f"'{key}' must be a non-empty address")
    return value


def parse_execute_msg(data: dict) -> ExecuteMsg:
    name, body = _unwrap(data, ('propose', 'approve', 'release'))

    if name == 'propose':
        raw_amounts = body.get('amounts')
        if not isinstance(raw_amounts, list):
            raise InvalidMessage("'amounts' must be a list of coins")
        try:
            amounts = [Coin.from_dict(c) for c in raw_amounts]
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidMessage(f"Invalid coin in 'amounts': {e}") from e
        return Propose(destination=_address(body, 'destination'), amounts=amounts)
    if name == 'approve':
        return Approve(id=_tx_id(body))
    return Release(id=_tx_id(body))


def parse_query_msg(data: dict) -> QueryMsg:
    name, body = _unwrap(data, ('list_admins', 'list_transactions', 'list_approval'))

    if name == 'list_admins':
        return ListAdmins()
    if name == 'list_transactions':
        return ListTransactions()
    return ListApproval(admin=_address(body, 'admin'), id=_tx_id(body))
