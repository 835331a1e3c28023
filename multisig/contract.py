"""
Entry points wiring messages into the approval engine

``instantiate``, ``execute`` and ``query`` mirror the host ABI: they take a
decoded message, dispatch on its variant and build a response for the host.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .engine import ApprovalEngine, TransferInstruction
from .msg import (
    Approve,
    ExecuteMsg,
    InstantiateMsg,
    ListAdmins,
    ListAdminsResp,
    ListApproval,
    ListApprovalResp,
    ListTransactions,
    ListTransactionsResp,
    Propose,
    QueryMsg,
    Release,
)


@dataclass
class Event:
    """Observability event handed to the host"""
    type: str
    attributes: List[Tuple[str, str]] = field(default_factory=list)

    def add_attribute(self, key: str, value: Any) -> 'Event':
        self.attributes.append((key, str(value)))
        return self

    def to_dict(self) -> dict:
        return {
            'type': self.type,
            'attributes': [{'key': k, 'value': v} for k, v in self.attributes],
        }


@dataclass
class Response:
    events: List[Event] = field(default_factory=list)
    messages: List[TransferInstruction] = field(default_factory=list)
    data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> dict:
        return {
            'events': [e.to_dict() for e in self.events],
            'messages': [m.to_dict() for m in self.messages],
            'data': self.data,
        }


def instantiate(engine: ApprovalEngine, msg: InstantiateMsg) -> Response:
    engine.initialize(msg.admins, msg.quorum)
    return Response(events=[
        Event("owner-added").add_attribute("addr", admin) for admin in msg.admins
    ])


def execute(engine: ApprovalEngine, caller: str, msg: ExecuteMsg) -> Response:
    if isinstance(msg, Propose):
        tx = engine.propose(caller, msg.destination, msg.amounts)
        return Response(
            events=[Event("new_tx").add_attribute("tx", tx)],
            data={'id': tx.id},
        )
    if isinstance(msg, Approve):
        engine.approve(caller, msg.id)
        return Response()
    if isinstance(msg, Release):
        instruction = engine.release(caller, msg.id)
        return Response(messages=[instruction])
    raise TypeError(f"Unhandled execute message: {msg!r}")


def query(engine: ApprovalEngine, msg: QueryMsg) -> dict:
    if isinstance(msg, ListAdmins):
        return ListAdminsResp(admins=engine.list_admins()).to_dict()
    if isinstance(msg, ListTransactions):
        return ListTransactionsResp(transactions=engine.list_transactions()).to_dict()
    if isinstance(msg, ListApproval):
        return ListApprovalResp(approved=engine.has_approved(msg.admin, msg.id)).to_dict()
    raise TypeError(f"Unhandled query message: {msg!r}")
