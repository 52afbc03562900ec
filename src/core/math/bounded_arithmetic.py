"""
Bounded Arithmetic Unit — целочисленная арифметика через таблицы

Модуль обеспечивает арифметику фиксированного диапазона без итераций:
- Add / Subtract: канонизация знака второго операнда + один lookup
- Negate: таблица MINUS
- Log2 / Pow2: взаимно обратные таблицы степеней двойки (включая дробные 1/2^k)

КАНОНИЗАЦИЯ ЗНАКОВ:
    Add(a, -b)      → Subtract(a, b)
    Subtract(a, -b) → Add(a, b)
После канонизации второй операнд неотрицателен, и таблицам нужен только
один квадрант знаков второго операнда. Модуль второго операнда берётся
из таблицы MINUS, а не вычисляется.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Add/Subtract корректны, если |a|, |b| и |результат| в пределах 2 * range_limit
2. Negate(Negate(a)) == a, Negate(0) == 0
3. Log2(Pow2(n)) == n, Pow2(Log2(a)) == a
4. Выход за диапазон → ResultOutOfRange (а не мусорный результат)
"""

import re
from typing import Optional

from src.core.math.lookup_tables import (
    FRACTION_PREFIX,
    ArithmeticConfig,
    LookupTableStore,
    get_table_store,
)


_INTEGER_PATTERN = re.compile(r"^[+-]?[0-9]+$")


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ArithmeticUnitError(Exception):
    """Базовая ошибка Bounded Arithmetic Unit."""

    pass


class ResultOutOfRange(ArithmeticUnitError, ArithmeticError):
    """
    Операнд или результат вне сконфигурированного диапазона.

    Таблицы не содержат записи для такого ключа. Расширение диапазона —
    вопрос конфигурации (range tier), а не логики.
    """

    pass


class InvalidOperand(ArithmeticUnitError, ValueError):
    """Токен не является целым числом (или степенью двойки для Log2)."""

    pass


# =============================================================================
# РАЗБОР ОПЕРАНДОВ
# =============================================================================


def parse_integer(operand: int | str) -> int:
    """
    Разбор целочисленного токена.

    Args:
        operand: int или текст вида "5", "-9", "+3"

    Returns:
        Целое значение

    Raises:
        InvalidOperand: Если токен не является целым числом
    """
    if isinstance(operand, bool):
        raise InvalidOperand(f"boolean is not an integer operand: {operand!r}")
    if isinstance(operand, int):
        return operand
    text = str(operand).strip()
    if not _INTEGER_PATTERN.match(text):
        raise InvalidOperand(f"not an integer token: {operand!r}")
    return int(text)


def normalize_power_token(operand: int | str) -> str:
    """
    Нормализация токена степени двойки к виду таблицы LOG2.

    Examples:
        >>> normalize_power_token(8)
        '8'
        >>> normalize_power_token(" 1/ 8 ")
        '1/8'
        >>> normalize_power_token("+16")
        '16'
        >>> normalize_power_token("1/1")
        '1'
    """
    if isinstance(operand, bool):
        raise InvalidOperand(f"boolean is not a power of two: {operand!r}")
    text = "".join(str(operand).split())
    if text.startswith(FRACTION_PREFIX):
        denominator = text[len(FRACTION_PREFIX):]
        if not (denominator.isascii() and denominator.isdigit()):
            raise InvalidOperand(f"not a power-of-two token: {operand!r}")
        if int(denominator) == 1:
            return "1"
        return f"{FRACTION_PREFIX}{int(denominator)}"
    if not _INTEGER_PATTERN.match(text):
        raise InvalidOperand(f"not a power-of-two token: {operand!r}")
    return str(int(text))


# =============================================================================
# ARITHMETIC UNIT
# =============================================================================


class BoundedArithmeticUnit:
    """
    Арифметика фиксированного диапазона поверх LookupTableStore.

    Все операции — чистые функции от операндов: одинаковый вход →
    одинаковый выход.
    """

    def __init__(
        self,
        config: Optional[ArithmeticConfig] = None,
        store: Optional[LookupTableStore] = None,
    ):
        """
        Args:
            config: конфигурация диапазона (default ArithmeticConfig())
            store: готовое хранилище таблиц (по умолчанию — общее для config)
        """
        self.config = config or (store.config if store is not None else ArithmeticConfig())
        self.store = store or get_table_store(self.config)

    # -------------------------------------------------------------------------
    # ADD / SUBTRACT
    # -------------------------------------------------------------------------

    def add(self, a: int | str, b: int | str) -> int:
        x, y = parse_integer(a), parse_integer(b)
        if y < 0:
            return self._lookup_sub(x, self._magnitude(y))
        return self._lookup_add(x, y)

    def subtract(self, a: int | str, b: int | str) -> int:
        x, y = parse_integer(a), parse_integer(b)
        if y < 0:
            return self._lookup_add(x, self._magnitude(y))
        return self._lookup_sub(x, y)

    def _magnitude(self, negative: int) -> int:
        magnitude = self.store.minus_entry(negative)
        if magnitude is None:
            raise ResultOutOfRange(
                f"operand {negative} outside ±{self.config.result_limit}"
            )
        return magnitude

    def _lookup_add(self, a: int, b: int) -> int:
        result = self.store.add_entry(a, b)
        if result is None:
            raise ResultOutOfRange(
                f"Add({a}, {b}) outside ±{self.config.result_limit}"
            )
        return result

    def _lookup_sub(self, a: int, b: int) -> int:
        result = self.store.sub_entry(a, b)
        if result is None:
            raise ResultOutOfRange(
                f"Subtract({a}, {b}) outside ±{self.config.result_limit}"
            )
        return result

    # -------------------------------------------------------------------------
    # NEGATE
    # -------------------------------------------------------------------------

    def negate(self, a: int | str) -> int:
        x = parse_integer(a)
        result = self.store.minus_entry(x)
        if result is None:
            raise ResultOutOfRange(f"Negate({x}) outside ±{self.config.result_limit}")
        return result

    # -------------------------------------------------------------------------
    # LOG2 / POW2
    # -------------------------------------------------------------------------

    def log2(self, a: int | str) -> int:
        """
        Показатель степени двойки.

        Args:
            a: Степень двойки: "8" → 3, "1/8" → -3

        Raises:
            InvalidOperand: Если a не является представимой степенью двойки
        """
        token = normalize_power_token(a)
        exponent = self.store.log2_entry(token)
        if exponent is None:
            raise InvalidOperand(
                f"Log2({token}): not a power of two within 2^±{self.config.pow2_exponent_limit}"
            )
        return exponent

    def pow2(self, n: int | str) -> str:
        """
        Степень двойки как токен.

        Args:
            n: Показатель (может быть отрицательным)

        Returns:
            "8" для n=3, "1/8" для n=-3

        Raises:
            ResultOutOfRange: Если |n| > pow2_exponent_limit
        """
        exponent = parse_integer(n)
        token = self.store.pow2_entry(exponent)
        if token is None:
            raise ResultOutOfRange(
                f"Pow2({exponent}) outside exponent limit ±{self.config.pow2_exponent_limit}"
            )
        return token


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def _default_unit() -> BoundedArithmeticUnit:
    return BoundedArithmeticUnit()


def add(a: int | str, b: int | str) -> int:
    """Add(a, b) на диапазоне по умолчанию."""
    return _default_unit().add(a, b)


def subtract(a: int | str, b: int | str) -> int:
    """Subtract(a, b) на диапазоне по умолчанию."""
    return _default_unit().subtract(a, b)


def negate(a: int | str) -> int:
    return _default_unit().negate(a)


def log2(a: int | str) -> int:
    return _default_unit().log2(a)


def pow2(n: int | str) -> str:
    return _default_unit().pow2(n)
