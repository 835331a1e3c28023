#!/usr/bin/env python3
"""
Complete demo of the Multi-Party Vault Multisig
"""

from multisig import ApprovalEngine, Coin, MemoryStore, QuorumNotMet
from multisig.identity import AdminKey


def main():
    print("=" * 60)
    print("🏦 MULTI-PARTY VAULT MULTISIG - COMPLETE DEMO")
    print("=" * 60)
    print()

    # Step 1: Setup
    print("🔧 STEP 1: Setting up vault admins")
    print("-" * 40)

    admins = {}
    for name in ["Alice", "Bob", "Carol"]:
        _, address = AdminKey.generate_key_pair()
        admins[name] = address
        print(f"✅ {name}: {address[:16]}...")

    print()

    # Step 2: Initialize
    print("🏗️  STEP 2: Initializing 2-of-3 multisig")
    print("-" * 40)

    engine = ApprovalEngine(MemoryStore())
    engine.initialize(list(admins.values()), 2)
    print(f"✅ Admins: {len(engine.list_admins())}")
    print(f"✅ Quorum: {engine.ledger.quorum()}")
    print()

    # Step 3: Proposal
    print("📝 STEP 3: Alice proposes a transfer")
    print("-" * 40)

    tx = engine.propose(admins["Alice"], "recipient", [Coin("atom", 5)])
    print(f"✅ {tx}")
    print(f"   Confirmations: {tx.confirmations}")
    print()

    print("Test: release before quorum")
    try:
        engine.release(admins["Alice"], tx.id)
        print("   ❌ UNEXPECTED: Should have failed")
    except QuorumNotMet as e:
        print(f"   ✅ EXPECTED FAILURE: {e}")
    print()

    # Step 4: Approval and release
    print("🗳️  STEP 4: Bob approves, Carol releases")
    print("-" * 40)

    engine.approve(admins["Bob"], tx.id)
    instruction = engine.release(admins["Carol"], tx.id)
    amounts = ", ".join(str(coin) for coin in instruction.amounts)
    print(f"✅ Transfer instruction: {amounts} -> {instruction.destination}")
    print()

    # Step 5: Summary
    print("📈 STEP 5: System summary")
    print("-" * 40)

    for record in engine.list_transactions():
        print(f"   Transaction {record.id}: {record.confirmations} confirmation(s)")
    for name, address in admins.items():
        approved = engine.has_approved(address, tx.id)
        print(f"   {name} approved: {'✅' if approved else '❌'}")

    print()
    print("🎯 Demo completed successfully!")


if __name__ == "__main__":
    main()
