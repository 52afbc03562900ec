"""
Lookup Table Store — предвычисленные таблицы арифметики

Таблицы ADD / SUB / MINUS / LOG2 / POW2 над симметричным диапазоном,
который задаётся одним параметром конфигурации (range tier).

Модуль отвечает только за генерацию и хранение данных. Логика арифметики
(канонизация знаков, диспетчеризация) — в bounded_arithmetic.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Записи таблиц immutable после генерации
2. Поиск — O(1): строка по первому операнду, индекс по второму (b >= 0)
3. Отсутствие записи (None) означает выход за диапазон, а не ошибку генерации
4. Все таблицы детерминированы: одинаковая конфигурация → одинаковые данные

РАЗМЕРЫ (range_limit = N):
    operand/result range: [-2N, 2N]
    ADD row(a):  b ∈ [0, 2N - a]   → a + b
    SUB row(a):  b ∈ [0, 2N + a]   → a - b
    MINUS:       a ∈ [-2N, 2N]     → -a
    POW2/LOG2:   n ∈ [-limit, limit] ↔ "2^n" | "1/2^|n|"
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Final, Optional


logger = logging.getLogger(__name__)


# =============================================================================
# ПАРАМЕТРЫ ДИАПАЗОНА
# =============================================================================

# Допустимые tiers диапазона (по модулю одного операнда)
RANGE_TIERS: Final[tuple[int, ...]] = (256, 512, 1024)

# Диапазон по умолчанию: операнды ±256, результат ±512
DEFAULT_RANGE_LIMIT: Final[int] = 256

# Максимальный показатель степени для POW2/LOG2
# Далеко за пределами любой практической ширины слова
POW2_EXPONENT_LIMIT: Final[int] = 73

# Префикс дробной области LOG2/POW2: 1/2, 1/4, ...
FRACTION_PREFIX: Final[str] = "1/"

# Число хранилищ таблиц, которые держит get_table_store
STORE_CACHE_SIZE: Final[int] = 8


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class ArithmeticConfig:
    """Конфигурация Bounded Arithmetic Unit.

    - range_limit: номинальный диапазон одного операнда (один из RANGE_TIERS)
    - pow2_exponent_limit: максимальный |n| для POW2/LOG2
    """

    range_limit: int = DEFAULT_RANGE_LIMIT
    pow2_exponent_limit: int = POW2_EXPONENT_LIMIT

    def __post_init__(self):
        if self.range_limit not in RANGE_TIERS:
            raise ValueError(
                f"range_limit must be one of {RANGE_TIERS}, got {self.range_limit}"
            )
        if self.pow2_exponent_limit < 0:
            raise ValueError(
                f"pow2_exponent_limit must be non-negative, got {self.pow2_exponent_limit}"
            )

    @property
    def result_limit(self) -> int:
        """Граница результата: удвоенный диапазон операнда."""
        return 2 * self.range_limit


class TableKind(str, Enum):
    """Виды таблиц в хранилище"""

    ADD = "ADD"
    SUB = "SUB"
    MINUS = "MINUS"
    LOG2 = "LOG2"
    POW2 = "POW2"


# =============================================================================
# ГЕНЕРАЦИЯ
# =============================================================================


def pow2_token(exponent: int) -> str:
    """
    Токен степени двойки.

    Examples:
        >>> pow2_token(3)
        '8'
        >>> pow2_token(-3)
        '1/8'
    """
    if exponent >= 0:
        return str(1 << exponent)
    return f"{FRACTION_PREFIX}{1 << -exponent}"


def _generate_add_row(a: int, limit: int) -> tuple[int, ...]:
    return tuple(range(a, limit + 1))


def _generate_sub_row(a: int, limit: int) -> tuple[int, ...]:
    return tuple(range(a, -limit - 1, -1))


# =============================================================================
# STORE
# =============================================================================


class LookupTableStore:
    """
    Хранилище таблиц для одного range tier.

    MINUS/POW2/LOG2 генерируются сразу (линейный размер). Строки ADD/SUB
    генерируются при первом обращении и кэшируются: полная квадратичная
    таблица для tier 1024 не нужна ни одному реальному вычислению.
    """

    def __init__(self, config: Optional[ArithmeticConfig] = None):
        self.config = config or ArithmeticConfig()
        limit = self.config.result_limit

        self._add_rows: dict[int, tuple[int, ...]] = {}
        self._sub_rows: dict[int, tuple[int, ...]] = {}
        self._minus: dict[int, int] = {a: -a for a in range(-limit, limit + 1)}

        exp_limit = self.config.pow2_exponent_limit
        self._pow2: dict[int, str] = {
            n: pow2_token(n) for n in range(-exp_limit, exp_limit + 1)
        }
        self._log2: dict[str, int] = {token: n for n, token in self._pow2.items()}

        logger.info(
            "lookup tables generated: range_limit=%d result_limit=%d "
            "minus=%d pow2=%d log2=%d",
            self.config.range_limit,
            limit,
            len(self._minus),
            len(self._pow2),
            len(self._log2),
        )

    def _row(self, kind: TableKind, a: int) -> Optional[tuple[int, ...]]:
        limit = self.config.result_limit
        if a < -limit or a > limit:
            return None

        rows = self._add_rows if kind == TableKind.ADD else self._sub_rows
        row = rows.get(a)
        if row is None:
            generate = _generate_add_row if kind == TableKind.ADD else _generate_sub_row
            row = generate(a, limit)
            rows[a] = row
            logger.debug("generated %s row %d (%d entries)", kind.value, a, len(row))
        return row

    def _entry(self, kind: TableKind, a: int, b: int) -> Optional[int]:
        if b < 0:
            return None
        row = self._row(kind, a)
        if row is None or b >= len(row):
            return None
        return row[b]

    def add_entry(self, a: int, b: int) -> Optional[int]:
        """ADD[a][b] для b >= 0; None вне диапазона."""
        return self._entry(TableKind.ADD, a, b)

    def sub_entry(self, a: int, b: int) -> Optional[int]:
        """SUB[a][b] для b >= 0; None вне диапазона."""
        return self._entry(TableKind.SUB, a, b)

    def minus_entry(self, a: int) -> Optional[int]:
        return self._minus.get(a)

    def pow2_entry(self, exponent: int) -> Optional[str]:
        return self._pow2.get(exponent)

    def log2_entry(self, token: str) -> Optional[int]:
        return self._log2.get(token)

    def table_sizes(self) -> dict[TableKind, int]:
        """Текущее число записей в каждой таблице (ADD/SUB — только сгенерированные строки)."""
        return {
            TableKind.ADD: sum(len(row) for row in self._add_rows.values()),
            TableKind.SUB: sum(len(row) for row in self._sub_rows.values()),
            TableKind.MINUS: len(self._minus),
            TableKind.LOG2: len(self._log2),
            TableKind.POW2: len(self._pow2),
        }


@lru_cache(maxsize=STORE_CACHE_SIZE)
def _cached_store(config: ArithmeticConfig) -> LookupTableStore:
    return LookupTableStore(config)


def get_table_store(config: Optional[ArithmeticConfig] = None) -> LookupTableStore:
    """Общее хранилище для конфигурации (таблицы read-only, разделяются безопасно)."""
    return _cached_store(config or ArithmeticConfig())
