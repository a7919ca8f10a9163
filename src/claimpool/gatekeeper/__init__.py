"""Gatekeeper — гейты допуска операций пула.

- GATE 0: Deposit Quadrant (запрет депозитов в ORPHANED_VALUE / VALUELESS_SUPPLY)
- GATE 1: Capacity (лимит value пула)
- GATE 2: Withdrawal Cooldown (time-gated вывод)
"""

from .gates import (
    Gate00DepositQuadrant,
    Gate00Result,
    Gate01Capacity,
    Gate01Result,
    Gate02Cooldown,
    Gate02Result,
)

__all__ = [
    "Gate00DepositQuadrant",
    "Gate00Result",
    "Gate01Capacity",
    "Gate01Result",
    "Gate02Cooldown",
    "Gate02Result",
]
