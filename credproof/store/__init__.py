"""
credproof Proof Store - in-memory cache of minted proofs.

The reference itself is the durable copy; the store only saves decoding.
"""

from credproof.store.store import ProofStore

__all__ = ["ProofStore"]
