"""Тесты для Chain Driver и Done Handler.

Coverage:
- Сквозные примеры вычисления цепочек
- Done Handler: вывод стека front-to-back
- Direct-форма операций
- Chained-форма: результат совпадает с direct
- Нарушения протокола и лимит шагов
- Пользовательские операции в реестре
"""

import logging

import pytest

from src.chain import (
    ChainConfig,
    ChainDriver,
    ChainResult,
    ExpansionLimitExceeded,
    MalformedChain,
    Operation,
    UnknownOperation,
    build_default_registry,
    done,
    evaluate,
)
from src.chain.protocol import ChainState, push
from src.core.domain import OperationInvocation, Value
from src.core.math import ArithmeticConfig, BoundedArithmeticUnit, ResultOutOfRange


@pytest.fixture
def driver() -> ChainDriver:
    return ChainDriver()


# =============================================================================
# ТЕСТЫ: Сквозные примеры
# =============================================================================


class TestEndToEnd:
    """Сквозные примеры цепочек."""

    def test_pop_two_subtract(self, driver):
        """(5 + 6) - (40 + 80) = -109."""
        result = driver.evaluate("Chain(Add(5,6), Add(40,80), Pop(2), Subtract($,$))")
        assert result.text == "(-109)"
        assert int(result.scalar()) == -109

    def test_sequence_of_single_pops(self, driver):
        result = driver.evaluate(
            "Chain(Add(5,-9), Pop(), Subtract($,2), Pop(), Negate($), Pop(), Identity($))"
        )
        assert result.scalar() == "6"

    def test_push_pop_identity_matches_literal(self, driver):
        chained = driver.evaluate("Chain(Push(100), Pop(), Identity($))")
        direct = driver.evaluate("Identity(100)")
        assert chained.scalar() == direct.scalar() == "100"

    def test_whitespace_separated(self, driver):
        result = driver.evaluate("Chain(Add(5,6) Add(40,80) Pop(2) Subtract($,$))")
        assert result.text == "(-109)"

    def test_pop_three(self, driver):
        result = driver.evaluate("Chain(Push(a) Push(b) Push(c) Pop(3) Identity($-$-$))")
        assert result.scalar() == "a-b-c"

    def test_log2_pow2_chain(self, driver):
        result = driver.evaluate("Chain(Pow2(-3) Pop() Log2($) Pop() Negate($))")
        assert result.scalar() == "3"

    def test_module_evaluate(self):
        assert evaluate("Chain(Add(1,1))").text == "(2)"


# =============================================================================
# ТЕСТЫ: Done Handler
# =============================================================================


class TestDoneHandler:
    """Вывод оставшегося стека."""

    def test_flush_most_recent_first(self, driver):
        result = driver.evaluate("Chain(Push(11) Push(18))")
        assert result.text == "(18)(11)"
        assert result.values == (Value.of(18), Value.of(11))
        assert result.terminated_by == "done"

    def test_empty_chain(self, driver):
        result = driver.run([])
        assert result.text == ""
        assert result.values == ()

    def test_done_with_pending_values(self):
        state = ChainState(pending=(Value.of(1),))
        with pytest.raises(MalformedChain, match="never consumed"):
            done(state)

    def test_done_flushes_state(self):
        state = push(push(ChainState(), Value.of(11)), Value.of(18))
        assert done(state).text == "(18)(11)"

    def test_scalar_requires_single_value(self, driver):
        result = driver.evaluate("Chain(Push(11) Push(18))")
        with pytest.raises(ValueError, match="exactly one"):
            result.scalar()

    def test_str(self, driver):
        assert str(driver.evaluate("Chain(Push(1))")) == "(1)"


# =============================================================================
# ТЕСТЫ: Direct vs chained
# =============================================================================


class TestDirectForm:
    """Direct-форма совпадает с chained-формой."""

    @pytest.mark.parametrize(
        "call",
        ["Add(5,6)", "Subtract(3,-4)", "Negate(7)", "Log2(1/16)", "Pow2(5)", "Push(x y)", "Identity(z)"],
    )
    def test_direct_equals_chained(self, driver, call):
        direct = driver.evaluate(call)
        chained = driver.evaluate(f"Chain({call})")
        assert direct.terminated_by == "direct"
        assert chained.scalar() == direct.scalar()

    def test_direct_pop_is_misuse(self, driver):
        with pytest.raises(MalformedChain, match="outside a Chain"):
            driver.evaluate("Pop()")

    def test_direct_placeholder_is_misuse(self, driver):
        with pytest.raises(MalformedChain, match="outside a Chain"):
            driver.evaluate("Negate($)")

    def test_direct_arity(self, driver):
        with pytest.raises(MalformedChain, match="takes 2 argument"):
            driver.evaluate("Add(1)")

    def test_direct_chain_rejected(self, driver):
        with pytest.raises(MalformedChain):
            driver.evaluate_direct(OperationInvocation(name="Chain"))


# =============================================================================
# ТЕСТЫ: Нарушения протокола
# =============================================================================


class TestMalformedChains:
    """Нарушения протокола цепочки."""

    def test_unknown_operation(self, driver, caplog):
        with caplog.at_level(logging.WARNING, logger="src.chain.driver"):
            with pytest.raises(UnknownOperation, match="Multiply"):
                driver.evaluate("Chain(Multiply(2,3))")
        assert "Multiply" in caplog.text

    def test_nested_chain(self, driver):
        with pytest.raises(MalformedChain, match="nested"):
            driver.evaluate("Chain(Chain(Add(1,2)))")

    def test_operation_without_chained_form(self):
        registry = build_default_registry()
        registry.register(Operation(name="Emit", direct=lambda args: Value.of("x"), arity=0))
        driver = ChainDriver(registry=registry)

        assert driver.evaluate("Emit()").text == "x"
        with pytest.raises(MalformedChain, match="no chained form"):
            driver.evaluate("Chain(Emit())")

    def test_pop_arity_mismatch(self, driver):
        with pytest.raises(MalformedChain, match="placeholder"):
            driver.evaluate("Chain(Push(1) Push(2) Pop(2) Negate($))")

    def test_pop_underflow(self, driver):
        with pytest.raises(MalformedChain):
            driver.evaluate("Chain(Push(1) Pop(2) Subtract($,$))")

    def test_pop_at_end(self, driver):
        with pytest.raises(MalformedChain, match="end of a Chain"):
            driver.evaluate("Chain(Push(1) Pop())")

    def test_placeholder_without_pop(self, driver):
        with pytest.raises(MalformedChain, match="without a preceding Pop"):
            driver.evaluate("Chain(Push(1) Negate($))")

    def test_push_without_argument(self, driver):
        with pytest.raises(MalformedChain, match="takes 1 argument"):
            driver.evaluate("Chain(Push())")

    def test_chained_arity(self, driver):
        with pytest.raises(MalformedChain, match="takes 1 argument"):
            driver.evaluate("Chain(Negate(1, 2))")

    def test_arithmetic_errors_propagate(self, driver):
        with pytest.raises(ResultOutOfRange):
            driver.evaluate("Chain(Add(500,500))")

    def test_expansion_limit(self):
        driver = ChainDriver(config=ChainConfig(max_steps=3))
        with pytest.raises(ExpansionLimitExceeded):
            driver.evaluate("Chain(Push(1) Push(2) Push(3) Push(4))")
        assert driver.evaluate("Chain(Push(1) Push(2) Push(3))").text == "(3)(2)(1)"

    def test_invalid_config(self):
        with pytest.raises(ValueError, match="max_steps"):
            ChainConfig(max_steps=0)


# =============================================================================
# ТЕСТЫ: Реестр операций
# =============================================================================


class TestRegistry:
    """Реестр операций."""

    def test_default_names(self):
        registry = build_default_registry()
        assert registry.names() == sorted(
            [
                "Add", "Subtract", "Negate", "Log2", "Pow2",
                "Identity", "Push", "Pop",
                "Unwrap", "Print", "Tokenize",
            ]
        )
        assert "Add" in registry
        assert "Chain" not in registry

    def test_duplicate_registration(self):
        registry = build_default_registry()
        with pytest.raises(ValueError, match="already registered"):
            registry.register(Operation.from_function("Add", lambda a, b: 0, arity=2))

    def test_replace_registration(self):
        registry = build_default_registry()
        registry.register(Operation.from_function("Add", lambda a, b: "sum", arity=2), replace=True)
        assert ChainDriver(registry=registry).evaluate("Add(1,2)").text == "sum"

    def test_custom_chain_aware_operation(self):
        registry = build_default_registry()
        registry.register(Operation.from_function("Double", lambda a: int(a) * 2, arity=1))
        driver = ChainDriver(registry=registry)
        result = driver.evaluate("Chain(Add(2,3) Pop() Double($) Pop() Negate($))")
        assert result.scalar() == "-10"

    def test_registry_with_larger_tier(self):
        unit = BoundedArithmeticUnit(ArithmeticConfig(range_limit=1024))
        driver = ChainDriver(registry=build_default_registry(unit))
        assert driver.evaluate("Chain(Add(1000,1000))").scalar() == "2000"

    def test_result_is_frozen(self, driver):
        result = driver.evaluate("Chain(Push(1))")
        assert isinstance(result, ChainResult)
        with pytest.raises(AttributeError):
            result.text = "x"  # type: ignore
