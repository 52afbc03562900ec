"""
Core math modules

Табличная арифметика фиксированного диапазона: хранилище таблиц и
Bounded Arithmetic Unit.
"""

# Lookup Table Store
from src.core.math.lookup_tables import (
    # Constants
    DEFAULT_RANGE_LIMIT,
    FRACTION_PREFIX,
    POW2_EXPONENT_LIMIT,
    RANGE_TIERS,
    STORE_CACHE_SIZE,
    # Types
    ArithmeticConfig,
    LookupTableStore,
    TableKind,
    # Functions
    get_table_store,
    pow2_token,
)

# Bounded Arithmetic Unit
from src.core.math.bounded_arithmetic import (
    ArithmeticUnitError,
    BoundedArithmeticUnit,
    InvalidOperand,
    ResultOutOfRange,
    add,
    log2,
    negate,
    normalize_power_token,
    parse_integer,
    pow2,
    subtract,
)

__all__ = [
    # Lookup Table Store — Constants
    "DEFAULT_RANGE_LIMIT",
    "FRACTION_PREFIX",
    "POW2_EXPONENT_LIMIT",
    "RANGE_TIERS",
    "STORE_CACHE_SIZE",
    # Lookup Table Store — Types
    "ArithmeticConfig",
    "LookupTableStore",
    "TableKind",
    # Lookup Table Store — Functions
    "get_table_store",
    "pow2_token",
    # Bounded Arithmetic — Exceptions
    "ArithmeticUnitError",
    "InvalidOperand",
    "ResultOutOfRange",
    # Bounded Arithmetic — Types
    "BoundedArithmeticUnit",
    # Bounded Arithmetic — Functions
    "add",
    "log2",
    "negate",
    "normalize_power_token",
    "parse_integer",
    "pow2",
    "subtract",
]
