"""GATE 2: Withdrawal Cooldown

Вывод разрешён, только если с последнего депозита держателя прошло не меньше
cooldown_period. Время поставляет внешний processor (в тех же единицах, что и
last_deposit_time).

- unlock_time = last_deposit_time + cooldown (saturating, без wraparound)
- current_time == unlock_time → PASS (граница включительная)
- cooldown == 0 → PASS сразу
"""

from dataclasses import dataclass

from claimpool.core.math.ledger_math import PRODUCTION_MATH, LedgerMath


@dataclass(frozen=True)
class Gate02Result:
    """Результат GATE 2."""

    withdraw_allowed: bool
    block_reason: str

    current_time: int
    unlock_time: int
    remaining: int

    details: str


class Gate02Cooldown:
    """GATE 2: time-gated допуск вывода."""

    def __init__(self, ledger_math: LedgerMath = PRODUCTION_MATH):
        self.ledger_math = ledger_math

    def evaluate(self, current_time: int, last_deposit_time: int, cooldown_period: int) -> Gate02Result:
        """Оценка GATE 2.

        Args:
            current_time: текущее время
            last_deposit_time: время последнего депозита держателя
            cooldown_period: cooldown пула

        Returns:
            Gate02Result с решением о допуске
        """
        w = self.ledger_math.width
        elapsed = self.ledger_math.cooldown_elapsed(current_time, last_deposit_time, cooldown_period)
        unlock_time = w.saturating_add(last_deposit_time, cooldown_period)
        remaining = w.saturating_sub(unlock_time, current_time)

        if not elapsed:
            return Gate02Result(
                withdraw_allowed=False,
                block_reason="cooldown_not_elapsed",
                current_time=current_time,
                unlock_time=unlock_time,
                remaining=remaining,
                details=f"Cooldown active until {unlock_time} (remaining {remaining})",
            )

        return Gate02Result(
            withdraw_allowed=True,
            block_reason="",
            current_time=current_time,
            unlock_time=unlock_time,
            remaining=0,
            details=f"PASS: unlocked at {unlock_time}",
        )
