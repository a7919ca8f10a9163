"""Pool Config — параметры пула, задаваемые при инициализации и админом."""

from dataclasses import dataclass
from typing import Final, Optional

from claimpool.core.math.checked_int import U64
from claimpool.core.math.ledger_math import UNCAPPED

# Cooldown по умолчанию: вывод доступен сразу после депозита
DEFAULT_COOLDOWN_PERIOD: Final[int] = 0


@dataclass(frozen=True)
class PoolConfig:
    """Конфигурация нового пула.

    - cooldown_period: минимальное время между депозитом и выводом
    - capacity: лимит value пула (0 = без лимита)
    """

    cooldown_period: int = DEFAULT_COOLDOWN_PERIOD
    capacity: int = UNCAPPED

    def __post_init__(self) -> None:
        U64.require(self.cooldown_period, "cooldown_period")
        U64.require(self.capacity, "capacity")


@dataclass(frozen=True)
class ConfigUpdate:
    """Частичное обновление конфигурации; None — оставить как есть."""

    cooldown_period: Optional[int] = None
    capacity: Optional[int] = None

    def __post_init__(self) -> None:
        if self.cooldown_period is not None:
            U64.require(self.cooldown_period, "cooldown_period")
        if self.capacity is not None:
            U64.require(self.capacity, "capacity")

    @property
    def is_empty(self) -> bool:
        return self.cooldown_period is None and self.capacity is None
