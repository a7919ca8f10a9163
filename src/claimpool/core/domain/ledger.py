"""
Pool Ledger / Position — записи состояния пула и держателя

Immutable Pydantic модели. Core никогда не мутирует их: processor получает
новую запись через model_copy(update=...) и коммитит её целиком, только если
ни одна функция core не вернула ошибку.

Pool Ledger (один на пул):
- total_deposited / total_withdrawn / total_diverted / total_returned:
  монотонно неубывающие, каждый обновляется ровно одним типом операции
- total_claim_supply: выпущенные claim-токены
- capacity: лимит value пула (0 = без лимита)
- cooldown_period: в тех же единицах времени, что и timestamps позиций

Position (одна на держателя в пуле):
- claim_amount: claim-токены держателя
- last_deposit_time: время последнего депозита (старт cooldown)
"""

from pydantic import BaseModel, Field, model_validator

from claimpool.core.math.checked_int import U64_MAX
from claimpool.core.math.ledger_math import PRODUCTION_MATH, UNCAPPED, LedgerMath
from claimpool.core.math.quadrant import PoolQuadrant, classify_quadrant


# =============================================================================
# POOL LEDGER
# =============================================================================


class PoolLedger(BaseModel):
    """
    Запись ledger'а пула.

    Валидация модели проверяет только локально проверяемые инварианты
    (диапазоны u64, withdrawn <= deposited). Межвызовные инварианты
    (returned <= diverted) — ответственность processor'а.
    """

    total_deposited: int = Field(0, ge=0, le=U64_MAX, description="Всего внесено (lifetime)")
    total_withdrawn: int = Field(0, ge=0, le=U64_MAX, description="Всего выведено держателями (lifetime)")
    total_diverted: int = Field(0, ge=0, le=U64_MAX, description="Всего выведено в страховой резерв")
    total_returned: int = Field(0, ge=0, le=U64_MAX, description="Всего возвращено из резерва")
    total_claim_supply: int = Field(0, ge=0, le=U64_MAX, description="Claim-токены в обращении")

    capacity: int = Field(UNCAPPED, ge=0, le=U64_MAX, description="Лимит value пула (0 = без лимита)")
    cooldown_period: int = Field(0, ge=0, le=U64_MAX, description="Cooldown вывода после депозита")

    model_config = {"frozen": True, "strict": True}

    @model_validator(mode="after")
    def validate_withdrawn_within_deposited(self) -> "PoolLedger":
        if self.total_withdrawn > self.total_deposited:
            raise ValueError(
                f"total_withdrawn {self.total_withdrawn} exceeds total_deposited {self.total_deposited}"
            )
        return self

    @property
    def is_capped(self) -> bool:
        return self.capacity != UNCAPPED

    def current_value(self, ledger_math: LedgerMath = PRODUCTION_MATH) -> int:
        """
        Текущее value пула: deposited - withdrawn - diverted + returned.

        Вычисляется в ширине ledger_math (по умолчанию u64); processor передаёт
        свою инстанцию, чтобы узкий пул не читался с u64 семантикой.

        Raises:
            LedgerUnderflow / LedgerOverflow: если ledger арифметически сломан
            ValueError: если поле не помещается в ширину ledger_math
        """
        return ledger_math.pool_value_with_diversion(
            self.total_deposited,
            self.total_withdrawn,
            self.total_diverted,
            self.total_returned,
        )

    def divertible(self, ledger_math: LedgerMath = PRODUCTION_MATH) -> int:
        """Сколько value ещё можно вывести в страховой резерв."""
        return ledger_math.divertible_amount(
            self.total_deposited, self.total_withdrawn, self.total_diverted
        )

    def outstanding_diversion(self) -> int:
        """diverted - returned (0 если returned уже догнал diverted)."""
        return max(self.total_diverted - self.total_returned, 0)

    def quadrant(self, ledger_math: LedgerMath = PRODUCTION_MATH) -> PoolQuadrant:
        return classify_quadrant(self.total_claim_supply, self.current_value(ledger_math))


# =============================================================================
# POSITION
# =============================================================================


class Position(BaseModel):
    """
    Позиция держателя в пуле.

    Создаётся при первом депозите; при claim_amount == 0 достигает
    терминального пустого состояния (не обязательно удаляется).
    """

    claim_amount: int = Field(0, ge=0, le=U64_MAX, description="Claim-токены держателя")
    last_deposit_time: int = Field(0, ge=0, le=U64_MAX, description="Время последнего депозита")

    model_config = {"frozen": True, "strict": True}

    @property
    def is_empty(self) -> bool:
        return self.claim_amount == 0
