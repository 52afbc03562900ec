"""
Contract Validation Module

Модуль для валидации JSON контрактов программ и результатов цепочки.
"""

from .programs import ChainProgram, load_chain_program
from .validators import (
    ChainProgramValidator,
    ChainResultValidator,
    ContractValidator,
    SchemaLoader,
    validate_chain_program,
    validate_chain_result,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ChainProgramValidator",
    "ChainResultValidator",
    "ChainProgram",
    # Functions
    "validate_chain_program",
    "validate_chain_result",
    "load_chain_program",
]
