"""Unit tests for the boolean feature expression language."""

import pytest
from pydantic import ValidationError

from flipkit.core.errors import ErrorCode, ExpressionSyntaxError
from flipkit.core.flipping import Feature, ExpressionFlipStrategy, FeatureFlipper
from flipkit.core.flipping.expression import (
    MAX_NESTING,
    ExpressionOperator,
    FeatureReference,
    Operation,
    parse_expression,
    tokenize,
)


class TestTokenizer:
    """Tests for tokenize."""

    def test_tokens_and_positions(self):
        """Test operators, parentheses and identifiers are split out."""
        tokens = tokenize("a & (b-1 | !c)")

        assert [t.text for t in tokens] == ["a", "&", "(", "b-1", "|", "!", "c", ")"]
        assert [t.position for t in tokens] == [0, 2, 4, 5, 9, 11, 12, 13]

    def test_whitespace_only(self):
        """Test blank input has no tokens."""
        assert tokenize("   ") == []


class TestExpressionNodes:
    """Tests for expression tree evaluation."""

    def test_reference(self):
        """Test references read the states map."""
        node = FeatureReference("a")
        assert node.evaluate({"a": True}) is True
        assert node.evaluate({"a": False}) is False

    def test_missing_reference_is_false(self):
        """Test references absent from the states map are disabled."""
        assert FeatureReference("missing").evaluate({}) is False

    def test_and(self):
        """Test AND needs every child."""
        node = Operation(
            ExpressionOperator.AND,
            (FeatureReference("a"), FeatureReference("b"), FeatureReference("c")),
        )
        assert node.evaluate({"a": True, "b": True, "c": True}) is True
        assert node.evaluate({"a": True, "b": False, "c": True}) is False

    def test_or(self):
        """Test OR needs one child."""
        node = Operation(
            ExpressionOperator.OR,
            (FeatureReference("a"), FeatureReference("b"), FeatureReference("c")),
        )
        assert node.evaluate({"a": False, "b": False, "c": False}) is False
        assert node.evaluate({"a": False, "b": True, "c": False}) is True

    def test_not(self):
        """Test NOT inverts its operand."""
        node = Operation(ExpressionOperator.NOT, (FeatureReference("a"),))
        assert node.evaluate({"a": True}) is False
        assert node.evaluate({"a": False}) is True

    def test_empty_operations(self):
        """Test empty AND is true and empty OR is false."""
        assert Operation(ExpressionOperator.AND, ()).evaluate({}) is True
        assert Operation(ExpressionOperator.OR, ()).evaluate({}) is False

    def test_not_requires_single_operand(self):
        """Test NOT with two operands is rejected."""
        with pytest.raises(ValueError):
            Operation(
                ExpressionOperator.NOT, (FeatureReference("a"), FeatureReference("b"))
            )

    def test_children_list_becomes_tuple(self):
        """Test children are stored as an immutable tuple."""
        node = Operation(ExpressionOperator.OR, [FeatureReference("a")])
        assert node.children == (FeatureReference("a"),)

    def test_structural_equality(self):
        """Test trees compare and hash by value."""
        first = parse_expression("a & (b | !c)")
        second = parse_expression("a&(b|!c)")

        assert first == second
        assert hash(first) == hash(second)

    def test_feature_names(self):
        """Test every referenced name is collected."""
        node = parse_expression("(a | b) & !c & a")
        assert node.feature_names() == frozenset({"a", "b", "c"})


class TestExpressionParser:
    """Tests for parse_expression."""

    def test_round_trip(self):
        """Test rendering reproduces the grouping of the source."""
        node = parse_expression("a & (b | !c)")

        assert str(node) == "a & (b | !c)"
        assert parse_expression(str(node)) == node

    def test_round_trip_evaluation(self):
        """Test the parsed tree evaluates as written."""
        node = parse_expression("a & (b | !c)")

        assert node.evaluate({"a": True, "b": False, "c": False}) is True
        assert node.evaluate({"a": True, "b": False, "c": True}) is False

    def test_precedence(self):
        """Test NOT binds tighter than AND, and AND tighter than OR."""
        node = parse_expression("a | b & !c")

        assert node == Operation(
            ExpressionOperator.OR,
            (
                FeatureReference("a"),
                Operation(
                    ExpressionOperator.AND,
                    (
                        FeatureReference("b"),
                        Operation(ExpressionOperator.NOT, (FeatureReference("c"),)),
                    ),
                ),
            ),
        )
        assert str(node) == "a | (b & !c)"

    def test_parentheses_override_precedence(self):
        """Test explicit grouping wins over precedence."""
        node = parse_expression("(a | b) & c")

        assert node.evaluate({"a": True, "c": False}) is False
        assert node.evaluate({"b": True, "c": True}) is True
        assert str(node) == "(a | b) & c"

    def test_chains_are_flattened(self):
        """Test repeated operators build a single n-ary operation."""
        node = parse_expression("a & b & c")

        assert node.operator is ExpressionOperator.AND
        assert len(node.children) == 3

    def test_double_negation(self):
        """Test NOT may be stacked."""
        node = parse_expression("!!a")

        assert node.evaluate({"a": True}) is True
        assert str(node) == "!!a"

    def test_negated_group(self):
        """Test NOT applied to a group keeps its parentheses."""
        node = parse_expression("!(a | b)")

        assert str(node) == "!(a | b)"
        assert node.evaluate({}) is True

    def test_single_identifier(self):
        """Test a bare name parses to a reference."""
        assert parse_expression("  feature-x ") == FeatureReference("feature-x")

    @pytest.mark.parametrize(
        "expression",
        ["a & ", "", "   ", "(a | b", "a | b)", "a b", "& a", "a | | b", "()", "!"],
    )
    def test_malformed(self, expression):
        """Test malformed expressions are rejected."""
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse_expression(expression)

        assert exc_info.value.code is ErrorCode.INVALID_EXPRESSION
        assert exc_info.value.expression == expression

    def test_error_position(self):
        """Test errors point at the offending token."""
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse_expression("a & b c")

        assert exc_info.value.position == 6
        assert "INVALID_EXPRESSION" in str(exc_info.value)

    def test_nesting_at_limit(self):
        """Test nesting up to the limit parses and evaluates."""
        negated = parse_expression("!" * MAX_NESTING + "a")
        grouped = parse_expression("(" * MAX_NESTING + "a" + ")" * MAX_NESTING)

        assert negated.evaluate({"a": True}) is (MAX_NESTING % 2 == 0)
        assert grouped == FeatureReference("a")

    @pytest.mark.parametrize(
        "expression",
        ["!" * 5000 + "a", "(" * 5000 + "a" + ")" * 5000, "!(" * 3000 + "a" + ")" * 3000],
    )
    def test_deep_nesting_rejected(self, expression):
        """Test pathologically deep input fails with a syntax error."""
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse_expression(expression)

        assert exc_info.value.position == MAX_NESTING
        assert "nested deeper" in str(exc_info.value)


class TestExpressionFlipStrategy:
    """Tests for ExpressionFlipStrategy."""

    def test_invalid_expression_fails_at_construction(self):
        """Test a malformed expression cannot be turned into a strategy."""
        with pytest.raises(ValidationError):
            ExpressionFlipStrategy(expression="a & ")

    def test_tree_is_compiled(self):
        """Test the parsed tree is exposed."""
        strategy = ExpressionFlipStrategy(expression="a | b")
        assert strategy.tree == parse_expression("a | b")

    @pytest.mark.asyncio
    async def test_copy_with_new_expression(self, store, make_context):
        """Test a copy with a replaced expression evaluates the new one."""
        await store.create(Feature(uid="a", enabled=True))
        await store.create(Feature(uid="b", enabled=False))

        original = ExpressionFlipStrategy(expression="a")
        copy = original.model_copy(update={"expression": "b"})

        assert copy.tree == parse_expression("b")
        assert await copy.evaluate(make_context()) is False
        assert await original.evaluate(make_context()) is True

    def test_feature_copy_keeps_expression_in_sync(self):
        """Test copying a feature keeps its strategy tree consistent."""
        feature = Feature(
            uid="gated", flipping_strategy=ExpressionFlipStrategy(expression="x & y")
        )
        enabled = feature.enable()

        assert enabled.flipping_strategy.tree == parse_expression("x & y")

    @pytest.mark.asyncio
    async def test_reads_enabled_flags_from_store(self, store, make_context):
        """Test references resolve through the store."""
        await store.create(Feature(uid="a", enabled=True))
        await store.create(Feature(uid="b", enabled=False))
        await store.create(Feature(uid="c", enabled=False))

        strategy = ExpressionFlipStrategy(expression="a & (b | !c)")
        assert await strategy.evaluate(make_context()) is True

        await store.enable("c")
        assert await strategy.evaluate(make_context()) is False

    @pytest.mark.asyncio
    async def test_missing_feature_is_disabled(self, store, make_context):
        """Test references to unknown features count as off."""
        await store.create(Feature(uid="a", enabled=True))

        assert await ExpressionFlipStrategy(expression="a & ghost").evaluate(
            make_context()
        ) is False
        assert await ExpressionFlipStrategy(expression="a & !ghost").evaluate(
            make_context()
        ) is True

    @pytest.mark.asyncio
    async def test_reference_is_shallow(self, store, make_context):
        """Test a referenced feature's own strategy is not evaluated."""
        await store.create(
            Feature(
                uid="gated",
                enabled=True,
                flipping_strategy=ExpressionFlipStrategy(expression="nowhere"),
            )
        )

        strategy = ExpressionFlipStrategy(expression="gated")
        assert await strategy.evaluate(make_context()) is True

    @pytest.mark.asyncio
    async def test_self_reference_is_false(self, store, make_context):
        """Test an expression naming its own feature reads it as off."""
        await store.create(Feature(uid="loop", enabled=True))

        strategy = ExpressionFlipStrategy(expression="loop")
        assert await strategy.evaluate(make_context(feature_name="loop")) is False

    @pytest.mark.asyncio
    async def test_through_flipper(self):
        """Test dependent features switch together."""
        flipper = FeatureFlipper(auto_create=False)
        await flipper.create(Feature(uid="basic-dashboard", enabled=True))
        await flipper.create(Feature(uid="premium-user", enabled=False))
        await flipper.create(
            Feature(
                uid="advanced-dashboard",
                enabled=True,
                flipping_strategy=ExpressionFlipStrategy(
                    expression="basic-dashboard & premium-user"
                ),
            )
        )

        assert await flipper.is_enabled("advanced-dashboard") is False
        await flipper.enable("premium-user")
        assert await flipper.is_enabled("advanced-dashboard") is True
