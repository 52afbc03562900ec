"""Stack Threading Protocol — передача стека между шагами цепочки.

Каждая chain-aware операция получает ChainState, изменяет его (снапшотом)
и возвращает следующее звено цепочки вместе с новым состоянием.

Push(v):
- v (в разделителях) добавляется в начало стека, всегда успешно

Pop(k), k ∈ {1, 2, 3}, Pop() ≡ Pop(1):
- снимает k значений с начала стека
- значения заполняют placeholder СЛЕДУЮЩЕГО вызова слева направо
  в обратном порядке снятия: k-е по давности → первый placeholder,
  последнее добавленное → последний placeholder
- так восстанавливается исходный порядок записи двухаргументных вычислений

Нарушения протокола → MalformedChain.
"""

from dataclasses import dataclass, field
from typing import Final, Optional

from src.core.domain.invocation import OperationInvocation
from src.core.domain.stack import Stack, StackUnderflow
from src.core.domain.value import Value


# Максимальная арность Pop
MAX_POP_ARITY: Final[int] = 3


class MalformedChain(Exception):
    """
    Нарушение протокола цепочки.

    Примеры: несовпадение арности Pop и числа placeholder, операция без
    chained-формы внутри Chain, терминальная операция вне Chain или не
    в конце цепочки.
    """

    pass


# =============================================================================
# STATE
# =============================================================================


@dataclass(frozen=True)
class Link:
    """Звено цепочки: вызов и продолжение (None — терминатор)."""

    invocation: OperationInvocation
    next: Optional["Link"] = None


@dataclass(frozen=True)
class ChainState:
    """Состояние, передаваемое между звеньями.

    - stack: текущий снапшот стека
    - pending: значения, снятые Pop для следующего вызова (в порядке заполнения)
    - output: результат терминальной операции (None пока цепочка не завершена)
    """

    stack: Stack = field(default_factory=Stack)
    pending: tuple[Value, ...] = ()
    output: Optional[str] = None
    terminated_by: Optional[str] = None

    @property
    def is_terminated(self) -> bool:
        return self.output is not None


# =============================================================================
# PUSH / POP
# =============================================================================


def push(state: ChainState, value: Value) -> ChainState:
    """Push(v): новое состояние с v в начале стека."""
    return ChainState(stack=state.stack.push(value), pending=state.pending)


def parse_pop_arity(invocation: OperationInvocation) -> int:
    """
    Арность Pop из аргументов вызова.

    Pop() → 1, Pop(2) → 2, Pop(3) → 3.

    Raises:
        MalformedChain: Если арность не целое число в 1..MAX_POP_ARITY
    """
    if not invocation.args:
        return 1
    if len(invocation.args) != 1:
        raise MalformedChain(f"Pop takes at most one argument, got {invocation.render()}")

    text = invocation.args[0]
    if not (text.isascii() and text.isdigit()) or not 1 <= int(text) <= MAX_POP_ARITY:
        raise MalformedChain(
            f"Pop arity must be 1..{MAX_POP_ARITY}, got {text!r}"
        )
    return int(text)


def pop(state: ChainState, arity: int) -> ChainState:
    """
    Pop(k): снятие k значений в pending.

    Args:
        state: Текущее состояние
        arity: k ∈ 1..MAX_POP_ARITY

    Returns:
        Состояние с pending в порядке заполнения placeholder

    Raises:
        MalformedChain: Если предыдущий Pop не был использован или стек короче k
    """
    if not 1 <= arity <= MAX_POP_ARITY:
        raise MalformedChain(f"Pop arity must be 1..{MAX_POP_ARITY}, got {arity}")
    if state.pending:
        raise MalformedChain(
            f"{len(state.pending)} popped value(s) were not consumed before the next Pop"
        )

    try:
        removed, stack = state.stack.pop(arity)
    except StackUnderflow as e:
        raise MalformedChain(f"Pop({arity}): {e}") from e

    # removed: front first; placeholder заполняются от самого старого
    return ChainState(stack=stack, pending=tuple(reversed(removed)))


def fill_pending(
    invocation: OperationInvocation, state: ChainState
) -> tuple[OperationInvocation, ChainState]:
    """
    Заполнение placeholder вызова значениями из pending.

    Args:
        invocation: Вызов, следующий за Pop
        state: Состояние с pending

    Returns:
        (вызов без placeholder, состояние с пустым pending)

    Raises:
        MalformedChain: Если число placeholder не равно числу снятых значений
    """
    placeholders = invocation.placeholder_count()

    if not state.pending:
        if placeholders:
            raise MalformedChain(
                f"{invocation.render()}: placeholder(s) without a preceding Pop"
            )
        return invocation, state

    if placeholders != len(state.pending):
        raise MalformedChain(
            f"{invocation.render()}: {placeholders} placeholder(s) "
            f"for Pop({len(state.pending)})"
        )

    filled = invocation.fill([value.bare() for value in state.pending])
    return filled, ChainState(stack=state.stack)
