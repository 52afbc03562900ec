"""Chain Driver — вычисление цепочки операций в порядке записи.

Chain(op1 op2 ... opN):
1. каждый вызов превращается в звено Link с продолжением (chained-форма)
2. после последнего звена — терминатор (None)
3. начальный стек пуст
4. звенья выполняются до терминатора или терминальной операции

Done Handler:
- если цепочка дошла до терминатора без терминальной операции,
  оставшийся стек выводится front-to-back, каждое значение в разделителях:
  Push 11, Push 18 → "(18)(11)"

Ограничение шагов (max_steps) соответствует лимиту раскрытий
у движка переписывания.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Final, Iterable, Optional

from src.chain.operations import OperationRegistry, UnknownOperation, build_default_registry
from src.chain.parser import CHAIN_NAME, parse_program
from src.chain.protocol import ChainState, Link, MalformedChain
from src.core.contracts.programs import SCHEMA_VERSION, load_chain_program
from src.core.domain.invocation import OperationInvocation
from src.core.domain.value import Value
from src.core.math.bounded_arithmetic import BoundedArithmeticUnit


logger = logging.getLogger(__name__)


# Лимит шагов одного вычисления цепочки по умолчанию
DEFAULT_MAX_STEPS: Final[int] = 10_000

# terminated_by для цепочки, завершённой Done Handler
DONE: Final[str] = "done"

# terminated_by для direct-вызова вне Chain
DIRECT: Final[str] = "direct"


class ExpansionLimitExceeded(MalformedChain):
    """Цепочка не завершилась за max_steps шагов."""

    pass


# =============================================================================
# CONFIG / RESULT
# =============================================================================


@dataclass(frozen=True)
class ChainConfig:
    """Конфигурация Chain Driver."""

    max_steps: int = DEFAULT_MAX_STEPS

    def __post_init__(self):
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be positive, got {self.max_steps}")


@dataclass(frozen=True)
class ChainResult:
    """Результат вычисления.

    - text: литеральное раскрытие ("(18)(11)", "((15))", "11")
    - values: оставшиеся значения стека, front first (пусто после терминальной операции)
    - terminated_by: "done", "direct" или имя терминальной операции
    """

    text: str
    values: tuple[Value, ...]
    terminated_by: str

    def scalar(self) -> str:
        """
        Единственное значение без разделителей.

        Raises:
            ValueError: Если значений не ровно одно
        """
        if len(self.values) != 1:
            raise ValueError(f"expected exactly one value, got {len(self.values)}: {self.text!r}")
        return self.values[0].bare()

    def to_contract(self) -> Dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "text": self.text,
            "values": [value.bare() for value in self.values],
            "terminated_by": self.terminated_by,
        }

    def __str__(self) -> str:
        return self.text


def done(state: ChainState) -> ChainResult:
    """
    Done Handler: вывод оставшегося стека.

    Raises:
        MalformedChain: Если значения, снятые Pop, так и не были использованы
    """
    if state.pending:
        raise MalformedChain(f"{len(state.pending)} popped value(s) were never consumed")
    return ChainResult(text=state.stack.render(), values=state.stack.values, terminated_by=DONE)


# =============================================================================
# DRIVER
# =============================================================================


class ChainDriver:
    """Вычисление цепочек и direct-вызовов над реестром операций."""

    def __init__(
        self,
        registry: Optional[OperationRegistry] = None,
        config: Optional[ChainConfig] = None,
    ):
        """
        Args:
            registry: реестр операций (default build_default_registry())
            config: конфигурация драйвера
        """
        self.registry = registry or build_default_registry()
        self.config = config or ChainConfig()

    @staticmethod
    def link(invocations: Iterable[OperationInvocation]) -> Optional[Link]:
        """Связный список звеньев; None — пустая цепочка."""
        head: Optional[Link] = None
        for invocation in reversed(list(invocations)):
            head = Link(invocation=invocation, next=head)
        return head

    def run(self, invocations: Iterable[OperationInvocation]) -> ChainResult:
        """
        Chain(ops...): вычисление цепочки.

        Raises:
            MalformedChain: Нарушение протокола цепочки
            ArithmeticUnitError: Ошибка арифметики внутри шага
        """
        link = self.link(invocations)
        state = ChainState()
        steps = 0

        while link is not None:
            steps += 1
            if steps > self.config.max_steps:
                raise ExpansionLimitExceeded(
                    f"chain exceeded {self.config.max_steps} steps"
                )

            name = link.invocation.name
            if name == CHAIN_NAME:
                logger.warning("nested Chain rejected: %s", link.invocation.render())
                raise MalformedChain("Chain cannot be nested inside a Chain")

            try:
                operation = self.registry.resolve(name)
            except UnknownOperation:
                logger.warning("unknown operation inside Chain: %s", name)
                raise
            if operation.chained is None:
                logger.warning("operation without chained form inside Chain: %s", name)

            logger.debug("step %d: %s (stack depth %d)", steps, link.invocation.render(), state.stack.depth)
            link, state = operation.step(link, state)

        if state.is_terminated:
            return ChainResult(text=state.output, values=(), terminated_by=state.terminated_by)
        return done(state)

    def evaluate_direct(self, invocation: OperationInvocation) -> ChainResult:
        """Direct-форма одиночного вызова."""
        if invocation.name == CHAIN_NAME:
            raise MalformedChain("Chain must be evaluated through run()")
        value = self.registry.resolve(invocation.name).evaluate_direct(invocation)
        return ChainResult(text=value.bare(), values=(value,), terminated_by=DIRECT)

    def evaluate(self, text: str) -> ChainResult:
        """
        Вычисление текстовой формы.

        Chain(...) вычисляется как цепочка, любой другой вызов — в direct-форме.

        Examples:
            >>> ChainDriver().evaluate("Chain(Add(5,6) Add(40,80) Pop(2) Subtract($,$))").text
            '(-109)'
            >>> ChainDriver().evaluate("Add(5,6)").text
            '11'
        """
        program = parse_program(text)
        if program.is_chain:
            return self.run(program.invocations)
        return self.evaluate_direct(program.invocations[0])


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def evaluate(text: str, registry: Optional[OperationRegistry] = None) -> ChainResult:
    """Вычисление текстовой формы на реестре по умолчанию."""
    return ChainDriver(registry=registry).evaluate(text)


def run_program(data: Dict[str, Any], config: Optional[ChainConfig] = None) -> ChainResult:
    """
    Вычисление программы из JSON контракта chain_program.

    Range tier программы определяет таблицы арифметики.
    """
    program = load_chain_program(data)
    registry = build_default_registry(BoundedArithmeticUnit(program.arithmetic_config))
    return ChainDriver(registry=registry, config=config).run(program.invocations)
