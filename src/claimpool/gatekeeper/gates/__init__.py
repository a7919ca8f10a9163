"""Gates — индивидуальные гейты Gatekeeper системы.

- GATE 0: Deposit Quadrant — депозит допустим только в EMPTY / ACTIVE
- GATE 1: Capacity — current_value + deposit <= capacity (0 = без лимита)
- GATE 2: Withdrawal Cooldown — current_time >= last_deposit_time + cooldown
"""

from .gate_00_deposit_quadrant import Gate00DepositQuadrant, Gate00Result
from .gate_01_capacity import Gate01Capacity, Gate01Result
from .gate_02_cooldown import Gate02Cooldown, Gate02Result

__all__ = [
    "Gate00DepositQuadrant",
    "Gate00Result",
    "Gate01Capacity",
    "Gate01Result",
    "Gate02Cooldown",
    "Gate02Result",
]
