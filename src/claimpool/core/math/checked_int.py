"""
Checked Integers — безопасная беззнаковая арифметика фиксированной ширины

Python int не переполняется, поэтому ширина выходного типа моделируется явно:
каждое значение ledger'а живёт в диапазоне [0, 2**bits - 1], а промежуточные
произведения вычисляются в расширенной ширине (2 * bits).

Модуль обеспечивает:
- Валидацию входов (тип int, не bool, 0 <= x <= max)
- Checked add/sub/mul: выход за диапазон → LedgerOverflow / LedgerUnderflow
- Saturating add/sub: clamp к [0, max], никогда не падает
- Narrow: перевод из расширенной ширины в целевую без усечения

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Результат никогда не усекается и не оборачивается (no wraparound)
2. Checked-операции либо возвращают точный результат, либо бросают исключение
3. Saturating-операции используются только там, где clamp — валидный ответ
"""

from dataclasses import dataclass
from typing import Final

from claimpool.core.errors import LedgerOverflow, LedgerUnderflow


# =============================================================================
# INTEGER WIDTH
# =============================================================================


@dataclass(frozen=True)
class IntWidth:
    """
    Беззнаковый целочисленный тип заданной разрядности.

    Examples:
        >>> U8.max_value
        255
        >>> U8.widened is U16
        True
    """

    bits: int

    def __post_init__(self) -> None:
        if self.bits <= 0 or self.bits % 8 != 0:
            raise ValueError(f"bits must be a positive multiple of 8, got {self.bits}")

    @property
    def name(self) -> str:
        return f"u{self.bits}"

    @property
    def max_value(self) -> int:
        return (1 << self.bits) - 1

    @property
    def widened(self) -> "IntWidth":
        """Ширина промежуточных вычислений (2 * bits)."""
        return _width_for(self.bits * 2)

    # -------------------------------------------------------------------------
    # Валидация
    # -------------------------------------------------------------------------

    def fits(self, value: int) -> bool:
        return 0 <= value <= self.max_value

    def require(self, value: int, name: str) -> int:
        """
        Валидация входа: целое число в диапазоне типа.

        Args:
            value: Проверяемое значение
            name: Имя параметра (для сообщения об ошибке)

        Returns:
            value без изменений

        Raises:
            ValueError: Если value не int, является bool или вне [0, max]
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name} must be an int, got {type(value).__name__}")
        if not self.fits(value):
            raise ValueError(
                f"{name} must be in [0, {self.max_value}] for {self.name}, got {value}"
            )
        return value

    # -------------------------------------------------------------------------
    # Checked операции
    # -------------------------------------------------------------------------

    def checked_add(self, a: int, b: int) -> int:
        """a + b; LedgerOverflow если результат > max."""
        result = a + b
        if result > self.max_value:
            raise LedgerOverflow(f"{self.name} add overflow: {a} + {b}")
        return result

    def checked_sub(self, a: int, b: int) -> int:
        """a - b; LedgerUnderflow если b > a."""
        if b > a:
            raise LedgerUnderflow(f"{self.name} sub underflow: {a} - {b}")
        return a - b

    def checked_mul(self, a: int, b: int) -> int:
        """a * b; LedgerOverflow если результат > max."""
        result = a * b
        if result > self.max_value:
            raise LedgerOverflow(f"{self.name} mul overflow: {a} * {b}")
        return result

    # -------------------------------------------------------------------------
    # Saturating операции
    # -------------------------------------------------------------------------

    def saturating_add(self, a: int, b: int) -> int:
        """a + b, ограниченное сверху max."""
        return min(a + b, self.max_value)

    def saturating_sub(self, a: int, b: int) -> int:
        """a - b, ограниченное снизу нулём."""
        return max(a - b, 0)

    def narrow(self, value: int, target: "IntWidth") -> int:
        """
        Перевод значения из этой (расширенной) ширины в target.

        Raises:
            LedgerOverflow: Если value не помещается в target (никогда не усекаем)
        """
        if not target.fits(value):
            raise LedgerOverflow(
                f"{self.name} -> {target.name} narrowing overflow: {value} > {target.max_value}"
            )
        return value


_WIDTHS: dict[int, IntWidth] = {}


def _width_for(bits: int) -> IntWidth:
    # Кэш для стабильной identity (U8.widened is U16)
    if bits not in _WIDTHS:
        _WIDTHS[bits] = IntWidth(bits)
    return _WIDTHS[bits]


# =============================================================================
# СТАНДАРТНЫЕ ШИРИНЫ
# =============================================================================

U8: Final[IntWidth] = _width_for(8)
U16: Final[IntWidth] = _width_for(16)
U32: Final[IntWidth] = _width_for(32)
U64: Final[IntWidth] = _width_for(64)
U128: Final[IntWidth] = _width_for(128)

U64_MAX: Final[int] = U64.max_value
