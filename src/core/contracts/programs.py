"""
Chain Program — загрузка программы из JSON контракта.

Данные валидируются по chain_program.json до построения вызовов.
"""

from dataclasses import dataclass
from typing import Any, Dict, Final

from src.core.contracts.validators import validate_chain_program
from src.core.domain.invocation import OperationInvocation
from src.core.math.lookup_tables import (
    DEFAULT_RANGE_LIMIT,
    POW2_EXPONENT_LIMIT,
    ArithmeticConfig,
)


SCHEMA_VERSION: Final[str] = "1"


@dataclass(frozen=True)
class ChainProgram:
    """Программа: вызовы цепочки и конфигурация арифметики."""

    invocations: tuple[OperationInvocation, ...]
    arithmetic_config: ArithmeticConfig

    def to_contract(self) -> Dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "range_limit": self.arithmetic_config.range_limit,
            "pow2_exponent_limit": self.arithmetic_config.pow2_exponent_limit,
            "chain": [
                {"op": invocation.name, "args": list(invocation.args)}
                for invocation in self.invocations
            ],
        }


def load_chain_program(data: Dict[str, Any]) -> ChainProgram:
    """
    Построение программы из JSON данных.

    Args:
        data: dict по схеме chain_program

    Returns:
        ChainProgram

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    validate_chain_program(data)

    invocations = tuple(
        OperationInvocation(name=item["op"], args=item.get("args", []))
        for item in data["chain"]
    )
    config = ArithmeticConfig(
        range_limit=data.get("range_limit", DEFAULT_RANGE_LIMIT),
        pow2_exponent_limit=data.get("pow2_exponent_limit", POW2_EXPONENT_LIMIT),
    )
    return ChainProgram(invocations=invocations, arithmetic_config=config)
