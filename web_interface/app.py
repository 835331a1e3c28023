#!/usr/bin/env python3
"""
Web interface for the Multi-Party Vault Multisig

Execute calls carry three headers: the admin's public key, a strictly
increasing per-admin nonce, and a signature over the vault's chain id, the
nonce and the raw body. A nonce is consumed before the operation runs, so a
signed request is accepted at most once whatever its outcome.
"""

import logging

from flask import Flask, jsonify, request

from multisig import contract
from multisig.config import EngineConfig
from multisig.engine import ApprovalEngine
from multisig.errors import (
    AuthorizationError,
    InvalidAdminSet,
    InvalidMessage,
    MultisigError,
    NonExistentTransaction,
    ProtocolError,
    SetupError,
    StaleNonce,
    StoreError,
    Unauthorized,
)
from multisig.identity import AdminKey, NonceTracker, normalize_address, signing_payload
from multisig.msg import (
    InstantiateMsg,
    ListAdmins,
    ListApproval,
    ListTransactions,
    parse_execute_msg,
)
from multisig.store import JsonFileStore, MemoryStore

logger = logging.getLogger(__name__)

PUBKEY_HEADER = "X-Admin-Pubkey"
NONCE_HEADER = "X-Nonce"
SIGNATURE_HEADER = "X-Signature"


def _status_for(error: MultisigError) -> int:
    if isinstance(error, (SetupError, InvalidMessage)):
        return 400
    if isinstance(error, StaleNonce):
        return 401
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, NonExistentTransaction):
        return 404
    if isinstance(error, ProtocolError):
        return 409
    return 500


def _parse_nonce(value):
    if not value or not (value.isascii() and value.isdigit()):
        return None
    return int(value)


def create_app(config: EngineConfig = None, store=None) -> Flask:
    config = config or EngineConfig.from_env()
    if store is None:
        store = JsonFileStore(config.store_path) if config.store_path else MemoryStore()

    engine = ApprovalEngine(store, config)
    nonces = NonceTracker(store)

    app = Flask(__name__)
    app.config['ENGINE'] = engine

    @app.errorhandler(MultisigError)
    def handle_multisig_error(error):
        status = _status_for(error)
        if isinstance(error, StoreError):
            logger.error("Store failure: %s", error)
        return jsonify({'success': False, 'error': str(error)}), status

    def _json_body() -> dict:
        data = request.get_json(silent=True)
        if data is None:
            raise InvalidMessage("Request body must be JSON")
        return data

    def _authenticated_caller():
        """Return (address, nonce) for a correctly signed request, else None"""
        pubkey = request.headers.get(PUBKEY_HEADER)
        signature = request.headers.get(SIGNATURE_HEADER)
        nonce = _parse_nonce(request.headers.get(NONCE_HEADER))
        if not pubkey or not signature or nonce is None:
            return None

        payload = signing_payload(config.chain_id, nonce, request.get_data())
        if not AdminKey.verify_signature(payload, signature, pubkey):
            return None
        return normalize_address(pubkey), nonce

    @app.route('/')
    def index():
        return jsonify({
            'service': 'multisig-vault',
            'chain_id': config.chain_id,
            'initialized': engine.is_initialized(),
            'track_released': config.track_released,
        })

    @app.route('/api/instantiate', methods=['POST'])
    def instantiate():
        """Set the admin set and quorum; admins are public keys in any hex encoding"""
        msg = InstantiateMsg.from_dict(_json_body())
        try:
            msg.admins = [normalize_address(admin) for admin in msg.admins]
        except ValueError as e:
            raise InvalidAdminSet(f"Invalid admin public key: {e}") from e

        response = contract.instantiate(engine, msg)
        return jsonify({'success': True, **response.to_dict()})

    @app.route('/api/execute', methods=['POST'])
    def execute():
        """Run a signed propose / approve / release message"""
        authenticated = _authenticated_caller()
        if authenticated is None:
            return jsonify({'success': False, 'error': 'Missing or invalid signature'}), 401
        caller, nonce = authenticated

        msg = parse_execute_msg(_json_body())

        with engine.serialized():
            if not engine.ledger.is_admin(caller):
                raise Unauthorized(caller)
            with store.atomic():
                nonces.consume(caller, nonce)
            response = contract.execute(engine, caller, msg)

        return jsonify({'success': True, **response.to_dict()})

    @app.route('/api/nonce/<admin>')
    def last_nonce(admin):
        """Last nonce consumed by an admin; the next request must use a larger one"""
        try:
            address = normalize_address(admin)
        except ValueError as e:
            raise InvalidMessage(str(e)) from e
        with engine.serialized():
            return jsonify({'nonce': nonces.last_nonce(address)})

    @app.route('/api/admins')
    def list_admins():
        return jsonify(contract.query(engine, ListAdmins()))

    @app.route('/api/transactions')
    def list_transactions():
        return jsonify(contract.query(engine, ListTransactions()))

    @app.route('/api/approvals/<admin>/<int:tx_id>')
    def list_approval(admin, tx_id):
        try:
            admin = normalize_address(admin)
        except ValueError:
            # Not a public key, so it can't match an admin and reads as False
            logger.debug("Approval query for non-key address %s", admin)
        return jsonify(contract.query(engine, ListApproval(admin=admin, id=tx_id)))

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    config = EngineConfig.from_env()
    app = create_app(config)
    app.run(
        host=config.host,
        port=config.port,
        debug=False
    )
