"""
Errors — таксономия ошибок accounting core

Все ошибки core представлены явными исключениями и никогда не маскируются
(нет wraparound, нет молчаливого усечения, нет clamp там, где нужен отказ).

Иерархия:
- LedgerMathError          : базовый класс ошибок чистой арифметики
  - LedgerUnderflow        : истинный результат вычитания был бы < 0
  - LedgerOverflow         : истинный результат превышает max выходного типа
  - ForbiddenState         : депозит в quadrant ORPHANED_VALUE / VALUELESS_SUPPLY
  - NoSupply               : погашение при supply == 0
- PoolOperationRejected    : отказ processor'а (zero amount, cooldown, ...)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ошибка core всегда пробрасывается непосредственному caller'у
2. Core никогда не делает retry: чистая функция на тех же входах упадёт так же
3. При любой ошибке никакое частичное состояние не коммитится
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Машиночитаемый код ошибки (для отчёта внешнему processor'у)."""

    UNDERFLOW = "UNDERFLOW"
    OVERFLOW = "OVERFLOW"
    FORBIDDEN_STATE = "FORBIDDEN_STATE"
    NO_SUPPLY = "NO_SUPPLY"

    # Отказы processor'а
    ZERO_AMOUNT = "ZERO_AMOUNT"
    COOLDOWN_NOT_ELAPSED = "COOLDOWN_NOT_ELAPSED"
    INSUFFICIENT_CLAIMS = "INSUFFICIENT_CLAIMS"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    RETURN_EXCEEDS_DIVERTED = "RETURN_EXCEEDS_DIVERTED"


# =============================================================================
# CORE MATH ERRORS
# =============================================================================


class LedgerMathError(Exception):
    """Базовая ошибка чистой арифметики ledger'а."""

    code: ErrorCode

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LedgerUnderflow(LedgerMathError):
    """Вычитание ушло бы в отрицательную область."""

    code = ErrorCode.UNDERFLOW


class LedgerOverflow(LedgerMathError):
    """
    Сложение/умножение превышает диапазон выходного типа.

    Усечение вместо отказа — самый опасный класс дефектов для этого core:
    результат, не помещающийся в выходной тип, всегда даёт это исключение.
    """

    code = ErrorCode.OVERFLOW


class ForbiddenState(LedgerMathError):
    """
    Депозит в запрещённом quadrant'е.

    - ORPHANED_VALUE   (supply == 0, value > 0): новый участник забрал бы value,
      которое он не вносил (остаточные страховые возвраты без держателей)
    - VALUELESS_SUPPLY (supply > 0, value == 0): размытие claim существующих
      держателей на ещё не возвращённое value
    """

    code = ErrorCode.FORBIDDEN_STATE


class NoSupply(LedgerMathError):
    """Погашение при supply == 0: нет claim'ов, которые можно исполнить."""

    code = ErrorCode.NO_SUPPLY


# =============================================================================
# PROCESSOR REJECTIONS
# =============================================================================


class PoolOperationRejected(Exception):
    """
    Отказ reference processor'а по проверке, не являющейся арифметикой core.

    Attributes:
        code: ErrorCode отказа
        message: человекочитаемое описание
    """

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(f"{code.value}: {message}")
        self.code = code
        self.message = message
