"""
Tests for the Value node: construction, validation, coercion and tape ids.
"""

import math

import numpy as np
import pytest

from scalar_aad import OpTag, Value
from scalar_aad.errors import NonFiniteValueError, UnsupportedInputError


# ============================================================================
# CONSTRUCTION
# ============================================================================

class TestConstruction:
    def test_defaults(self):
        v = Value(5)
        assert v.data == 5.0
        assert v.grad == 0.0
        assert v.label == ""
        assert v.children == ()
        assert v.operation is OpTag.LEAF
        assert v.is_leaf

    def test_label(self):
        v = Value(1.5, "x")
        assert v.label == "x"

    def test_ids_increase(self, fresh_tape):
        a = Value(1)
        b = Value(2)
        c = a + b
        assert a.id < b.id < c.id
        assert fresh_tape.get(c.id) is c

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_rejects_non_finite(self, bad):
        with pytest.raises(NonFiniteValueError, match="finite"):
            Value(bad)

    def test_non_finite_is_value_error(self):
        with pytest.raises(ValueError):
            Value(math.nan)

    def test_rejects_non_numeric_data(self):
        with pytest.raises(NonFiniteValueError):
            Value("10")

    def test_float_and_repr(self):
        v = Value(5)
        assert float(v) == 5.0
        assert repr(v) == "Value(data=5.0000, grad=0.0000)"


# ============================================================================
# MUTATION
# ============================================================================

class TestMutation:
    def test_set_data(self):
        v = Value(1)
        v.data = 3.5
        assert v.data == 3.5

    def test_set_data_validates(self):
        v = Value(1)
        with pytest.raises(NonFiniteValueError):
            v.data = math.inf
        with pytest.raises(NonFiniteValueError):
            v.data = "10"
        assert v.data == 1.0

    def test_set_grad_validates(self):
        v = Value(1)
        v.grad = 2.0
        assert v.grad == 2.0
        with pytest.raises(NonFiniteValueError):
            v.grad = math.nan

    def test_structure_is_read_only(self):
        v = Value(1) + Value(2)
        with pytest.raises(AttributeError):
            v.label = "x"
        with pytest.raises(AttributeError):
            v.operation = OpTag.MUL


# ============================================================================
# COERCION
# ============================================================================

class TestFromAny:
    def test_value_passes_through(self):
        v = Value(5)
        assert Value.from_any(v) is v
        assert Value.from_any(Value.from_any(v)) is v

    @pytest.mark.parametrize("x, expected", [
        (5, 5.0),
        (-42, -42.0),
        (0, 0.0),
        (math.pi, math.pi),
        (np.float64(2.5), 2.5),
        (np.int32(7), 7.0),
    ])
    def test_numbers(self, x, expected):
        assert Value.from_any(x).data == pytest.approx(expected)

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_numbers(self, bad):
        with pytest.raises(NonFiniteValueError):
            Value.from_any(bad)

    @pytest.mark.parametrize("text, expected", [
        ("5", 5.0),
        ("-5", -5.0),
        ("+5", 5.0),
        ("3.14", 3.14),
        ("0.14", 0.14),
        ("1e-10", 1e-10),
        ("1.23e+4", 12300.0),
        ("  5  ", 5.0),
        ("\n3.14\t", 3.14),
    ])
    def test_strings(self, text, expected):
        assert Value.from_any(text).data == pytest.approx(expected)

    @pytest.mark.parametrize("text", ["abc", "5.5.5", "3+", "--5", "", "   ", "1_000"])
    def test_invalid_strings(self, text):
        with pytest.raises(UnsupportedInputError, match="Invalid number format"):
            Value.from_any(text)

    def test_non_finite_strings(self):
        with pytest.raises(NonFiniteValueError):
            Value.from_any("nan")
        with pytest.raises(NonFiniteValueError):
            Value.from_any("inf")

    def test_booleans(self):
        assert Value.from_any(True).data == 1.0
        assert Value.from_any(False).data == 0.0

    def test_none(self):
        with pytest.raises(UnsupportedInputError, match="None"):
            Value.from_any(None)

    def test_single_element_sequences(self):
        assert Value.from_any([5]).data == 5.0
        assert Value.from_any((-3.14,)).data == pytest.approx(-3.14)
        assert Value.from_any(np.array([2.0])).data == 2.0

    @pytest.mark.parametrize("seq", [[], [1, 2], np.array([1.0, 2.0])])
    def test_wrong_length_sequences(self, seq):
        with pytest.raises(UnsupportedInputError, match="exactly one"):
            Value.from_any(seq)

    def test_sequence_with_bad_element(self):
        with pytest.raises(UnsupportedInputError, match="Invalid number format"):
            Value.from_any(["abc"])

    def test_other_objects(self):
        with pytest.raises(UnsupportedInputError, match="Cannot convert dict"):
            Value.from_any({})
        with pytest.raises(TypeError):
            Value.from_any(object())
