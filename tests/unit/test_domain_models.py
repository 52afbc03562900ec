"""
Тесты для доменных моделей: Value, Stack, OperationInvocation

Проверяет:
1. Создание и валидацию моделей Pydantic
2. Отображение значений (bare / enclosed)
3. LIFO семантику стека и снапшоты
4. Заполнение placeholder в вызовах
5. Immutability (frozen=True)
"""

import pytest
from pydantic import ValidationError

from src.core.domain import (
    PLACEHOLDER,
    OperationInvocation,
    Stack,
    StackUnderflow,
    Value,
)


# =============================================================================
# VALUE TESTS
# =============================================================================


class TestValue:
    """Тесты для модели Value"""

    def test_from_text(self):
        value = Value.from_text("  a   b c ")
        assert value.tokens == ("a", "b", "c")
        assert value.bare() == "a b c"

    def test_of_integer(self):
        assert Value.of(-109).tokens == ("-109",)

    def test_enclosed(self):
        assert Value.of(15).enclosed() == "(15)"
        assert Value.of(15).bare() == "15"
        assert str(Value.of(15)) == "15"

    def test_empty_value(self):
        assert Value().bare() == ""
        assert Value().enclosed() == "()"

    def test_invalid_token_rejected(self):
        with pytest.raises(ValidationError):
            Value(tokens=("a b",))
        with pytest.raises(ValidationError):
            Value(tokens=("",))

    def test_value_immutable(self):
        value = Value.of(1)
        with pytest.raises(ValidationError):
            value.tokens = ("2",)  # type: ignore

    def test_equality(self):
        assert Value.of(11) == Value.from_text("11")
        assert Value.of(11) != Value.of(12)


# =============================================================================
# STACK TESTS
# =============================================================================


class TestStack:
    """Тесты для модели Stack"""

    def test_empty(self):
        stack = Stack()
        assert stack.is_empty()
        assert stack.depth == 0
        assert stack.render() == ""

    def test_push_inserts_at_front(self):
        stack = Stack().push(Value.of(11)).push(Value.of(18))
        assert stack.front() == Value.of(18)
        assert stack.render() == "(18)(11)"
        assert len(stack) == 2

    def test_push_returns_snapshot(self):
        empty = Stack()
        one = empty.push(Value.of(1))
        assert empty.is_empty()
        assert one.depth == 1

    def test_pop_removes_from_front(self):
        stack = Stack().push(Value.of(1)).push(Value.of(2)).push(Value.of(3))
        removed, rest = stack.pop(2)
        assert removed == (Value.of(3), Value.of(2))
        assert rest.values == (Value.of(1),)
        # исходный снапшот не изменился
        assert stack.depth == 3

    def test_pop_underflow(self):
        stack = Stack().push(Value.of(1))
        with pytest.raises(StackUnderflow, match="depth 1"):
            stack.pop(2)

    def test_pop_invalid_count(self):
        with pytest.raises(ValueError):
            Stack().pop(0)

    def test_front_of_empty(self):
        with pytest.raises(StackUnderflow):
            Stack().front()

    def test_stack_immutable(self):
        stack = Stack()
        with pytest.raises(ValidationError):
            stack.values = (Value.of(1),)  # type: ignore


# =============================================================================
# INVOCATION TESTS
# =============================================================================


class TestOperationInvocation:
    """Тесты для модели OperationInvocation"""

    def test_integer_args_normalized(self):
        invocation = OperationInvocation(name="Add", args=[5, -9])
        assert invocation.args == ("5", "-9")

    def test_args_stripped(self):
        invocation = OperationInvocation(name="Add", args=[" 5 ", "6"])
        assert invocation.args == ("5", "6")

    def test_invalid_name(self):
        with pytest.raises(ValidationError):
            OperationInvocation(name="1Add")
        with pytest.raises(ValidationError):
            OperationInvocation(name="")

    def test_placeholder_count(self):
        assert PLACEHOLDER == "$"
        assert OperationInvocation(name="Subtract", args=("$", "$")).placeholder_count() == 2
        assert OperationInvocation(name="Print", args=("($ $)",)).placeholder_count() == 2
        assert OperationInvocation(name="Add", args=("1", "2")).placeholder_count() == 0

    def test_fill_left_to_right(self):
        invocation = OperationInvocation(name="Subtract", args=("$", "$"))
        filled = invocation.fill(["11", "120"])
        assert filled.args == ("11", "120")
        assert filled.name == "Subtract"

    def test_fill_within_argument(self):
        invocation = OperationInvocation(name="Identity", args=("a$b$c",))
        assert invocation.fill(["1", "2"]).args == ("a1b2c",)

    def test_fill_count_mismatch(self):
        invocation = OperationInvocation(name="Subtract", args=("$", "2"))
        with pytest.raises(ValueError, match="1 placeholder"):
            invocation.fill(["1", "2"])

    def test_fill_all(self):
        invocation = OperationInvocation(name="Print", args=("$ + $",))
        assert invocation.fill_all("(15)").args == ("(15) + (15)",)

    def test_fill_all_keeps_body(self):
        invocation = OperationInvocation(name="Tokenize", args=("A_$", "B_$"), body="A_$,B_$")
        filled = invocation.fill_all("3")
        assert filled.template() == "A_3,B_3"
        assert filled.args == ("A_3", "B_3")

    def test_fill_keeps_body(self):
        invocation = OperationInvocation(name="Subtract", args=("$", "$"), body="$,$")
        assert invocation.fill(["11", "120"]).template() == "11,120"

    def test_template_without_body(self):
        invocation = OperationInvocation(name="Unwrap", args=("a", "b"))
        assert invocation.template() == "a, b"

    def test_render(self):
        invocation = OperationInvocation(name="Add", args=("5", "6"))
        assert invocation.render() == "Add(5, 6)"
        assert str(OperationInvocation(name="Pop")) == "Pop()"
