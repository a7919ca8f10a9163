"""GATE 1: Capacity

Блокирует депозит, если value пула после депозита превысит capacity.

Проверяется ТЕКУЩЕЕ value пула, а не lifetime total_deposited: монотонный
total_deposited навсегда закрыл бы пул по достижении лимита, даже если почти
всё value уже выведено.

- capacity == 0 → без лимита, всегда PASS
- переполнение current_value + deposit → блокировка
- ровно capacity → PASS, capacity + 1 → блокировка
"""

from dataclasses import dataclass
from typing import Optional

from claimpool.core.math.ledger_math import PRODUCTION_MATH, UNCAPPED, LedgerMath


@dataclass(frozen=True)
class Gate01Result:
    """Результат GATE 1."""

    entry_allowed: bool
    block_reason: str

    current_value: int
    deposit: int
    capacity: int

    # None если сумма не помещается в тип
    new_total: Optional[int]

    details: str


class Gate01Capacity:
    """GATE 1: capacity guard."""

    def __init__(self, ledger_math: LedgerMath = PRODUCTION_MATH):
        self.ledger_math = ledger_math

    def evaluate(self, current_value: int, deposit: int, capacity: int) -> Gate01Result:
        """Оценка GATE 1.

        Args:
            current_value: текущее value пула
            deposit: сумма депозита
            capacity: лимит value пула (0 = без лимита)

        Returns:
            Gate01Result с решением о допуске
        """
        exceeds = self.ledger_math.exceeds_capacity(current_value, deposit, capacity)
        new_total = current_value + deposit
        if not self.ledger_math.width.fits(new_total):
            new_total = None

        if exceeds:
            if new_total is None:
                details = f"Deposit {deposit} overflows pool value {current_value}"
            else:
                details = f"New pool value {new_total} exceeds capacity {capacity}"
            return Gate01Result(
                entry_allowed=False,
                block_reason="capacity_exceeded",
                current_value=current_value,
                deposit=deposit,
                capacity=capacity,
                new_total=new_total,
                details=details,
            )

        cap_note = "uncapped" if capacity == UNCAPPED else f"{new_total}/{capacity}"
        return Gate01Result(
            entry_allowed=True,
            block_reason="",
            current_value=current_value,
            deposit=deposit,
            capacity=capacity,
            new_total=new_total,
            details=f"PASS: {cap_note}",
        )
