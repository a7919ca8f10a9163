"""
Domain records.

Contains the persisted-record models consumed by the external processor:
PoolLedger and Position.
"""

from claimpool.core.domain.ledger import PoolLedger, Position

__all__ = [
    "PoolLedger",
    "Position",
]
