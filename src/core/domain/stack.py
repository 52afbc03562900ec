"""
Stack — стек значений цепочки

Immutable Pydantic модель. Каждая операция получает снапшот и возвращает
новый снапшот: push/pop никогда не изменяют исходный экземпляр.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. push всегда вставляет в начало (front = index 0)
2. pop всегда снимает с начала
3. Один Stack не разделяется между двумя вычислениями цепочки
"""

from pydantic import BaseModel, Field

from src.core.domain.value import Value


class StackUnderflow(IndexError):
    """Попытка снять со стека больше значений, чем в нём есть."""

    pass


class Stack(BaseModel):
    """
    LIFO стек значений.

    values[0] — последнее добавленное значение (front).
    """

    values: tuple[Value, ...] = Field(default=(), description="Значения, front first")

    model_config = {"frozen": True}

    def push(self, value: Value) -> "Stack":
        """Новый снапшот с value в начале."""
        return Stack(values=(value,) + self.values)

    def pop(self, count: int = 1) -> tuple[tuple[Value, ...], "Stack"]:
        """
        Снятие count значений с начала стека.

        Args:
            count: Количество значений (>= 1)

        Returns:
            (снятые значения в порядке снятия — front first, новый снапшот)

        Raises:
            ValueError: Если count < 1
            StackUnderflow: Если в стеке меньше count значений
        """
        if count < 1:
            raise ValueError(f"pop count must be positive, got {count}")
        if count > len(self.values):
            raise StackUnderflow(
                f"cannot pop {count} value(s) from a stack of depth {len(self.values)}"
            )
        return self.values[:count], Stack(values=self.values[count:])

    def front(self) -> Value:
        """Последнее добавленное значение без снятия."""
        if not self.values:
            raise StackUnderflow("stack is empty")
        return self.values[0]

    @property
    def depth(self) -> int:
        return len(self.values)

    def is_empty(self) -> bool:
        return not self.values

    def render(self) -> str:
        """Все значения front-to-back, каждое в разделителях: "(18)(11)"."""
        return "".join(value.enclosed() for value in self.values)

    def __len__(self) -> int:
        return len(self.values)
