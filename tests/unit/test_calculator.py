"""Calculator unit tests."""

import pytest

from calculator import Calculator


@pytest.fixture
def calculator():
    return Calculator()


def test_add(calculator):
    result = calculator.add(5, 3)
    assert result == 8
    assert result > 0


def test_subtract(calculator):
    assert calculator.subtract(10, 4) == 6


def test_multiply(calculator):
    assert calculator.multiply(6, 7) == 42


def test_divide(calculator):
    assert calculator.divide(15, 3) == 5.0
    assert calculator.divide(7, 2) == 3.5


def test_divide_by_zero(calculator):
    with pytest.raises(ZeroDivisionError, match="Cannot divide by zero"):
        calculator.divide(10, 0)


@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [
        (2, 3, 5),
        (10, 15, 25),
        (-5, -3, -8),
        (0, 5, 5),
        (5, -3, 2),
        (-5, 3, -2),
    ],
)
def test_add_combinations(calculator, a, b, expected):
    assert calculator.add(a, b) == expected
