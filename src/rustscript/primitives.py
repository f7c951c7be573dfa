"""Operator semantics on runtime values.

The functions here know nothing about scopes or source locations; they raise
errors without a location and the evaluator attaches the node's position.
"""
from rustscript.errors import DivisionByZero, InvalidArgument, TypeMismatch
from rustscript.values import (
    Bool, Char, ListValue, Number, Str, Value,
    display, is_sequence, make_bool, make_list, sequence_items,
)


def _mismatch(operator: str, *operands: Value) -> TypeMismatch:
    kinds = ', '.join(operand.type_name for operand in operands)
    return TypeMismatch(f"Operator '{operator}' is not defined for ({kinds})")


def _shift_char(char: Char, offset: int) -> Char:
    code = ord(char.value) + offset
    if not 0 <= code <= 0x10FFFF:
        raise InvalidArgument(f"Char arithmetic out of range: {code}")
    return Char(chr(code))


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def add(left: Value, right: Value) -> Value:
    if isinstance(left, Number) and isinstance(right, Number):
        return Number(left.value + right.value)
    if isinstance(left, Str) or isinstance(right, Str):
        return Str(display(left) + display(right))
    if isinstance(left, Char) and isinstance(right, Number) and right.is_integral:
        return _shift_char(left, right.value)
    if isinstance(left, ListValue) and isinstance(right, ListValue):
        return make_list(left.items + right.items)
    raise _mismatch('+', left, right)


def subtract(left: Value, right: Value) -> Value:
    if isinstance(left, Number) and isinstance(right, Number):
        return Number(left.value - right.value)
    if isinstance(left, Char) and isinstance(right, Number) and right.is_integral:
        return _shift_char(left, -right.value)
    raise _mismatch('-', left, right)


def multiply(left: Value, right: Value) -> Value:
    if isinstance(left, Number) and isinstance(right, Number):
        return Number(left.value * right.value)
    raise _mismatch('*', left, right)


def divide(left: Value, right: Value) -> Value:
    if not (isinstance(left, Number) and isinstance(right, Number)):
        raise _mismatch('/', left, right)
    if right.value == 0:
        raise DivisionByZero("Division by zero")
    if left.is_integral and right.is_integral:
        return Number(_truncating_div(left.value, right.value))
    return Number(left.value / right.value)


def modulo(left: Value, right: Value) -> Value:
    if not (isinstance(left, Number) and isinstance(right, Number)
            and left.is_integral and right.is_integral):
        raise _mismatch('%', left, right)
    if right.value == 0:
        raise DivisionByZero("Modulo by zero")
    return Number(left.value - right.value * _truncating_div(left.value, right.value))


def _comparable(left: Value, right: Value) -> bool:
    return type(left) is type(right) and isinstance(left, (Number, Char, Str))


def less_than(left: Value, right: Value) -> Value:
    if not _comparable(left, right):
        raise _mismatch('<', left, right)
    return make_bool(left.value < right.value)


def greater_than(left: Value, right: Value) -> Value:
    if not _comparable(left, right):
        raise _mismatch('>', left, right)
    return make_bool(left.value > right.value)


def equals(left: Value, right: Value) -> bool:
    """Structural equality; values of different kinds are never equal"""
    return left == right


def negate(operand: Value) -> Value:
    if isinstance(operand, Number):
        return Number(-operand.value)
    if isinstance(operand, Bool):
        return make_bool(not operand.value)
    raise TypeMismatch(f"Cannot negate a value of type {operand.type_name}")


def head(operand: Value) -> Value:
    if not is_sequence(operand):
        raise TypeMismatch(f"Cannot take the head of a value of type {operand.type_name}")
    items = sequence_items(operand)
    if not items:
        raise InvalidArgument("Cannot take the head of an empty list")
    return items[0]


def tail(operand: Value) -> Value:
    if isinstance(operand, Str):
        return Str(operand.value[1:])
    if isinstance(operand, ListValue):
        return ListValue(operand.items[1:])
    raise TypeMismatch(f"Cannot take the tail of a value of type {operand.type_name}")


def truthy(value: Value) -> bool:
    if isinstance(value, Bool):
        return value.value
    if isinstance(value, Str):
        return bool(value.value)
    if isinstance(value, ListValue):
        return bool(value.items)
    raise TypeMismatch(f"A value of type {value.type_name} has no truth value")


BINARY_OPERATORS = {
    '+': add,
    '-': subtract,
    '*': multiply,
    '/': divide,
    '%': modulo,
    '<': less_than,
    '>': greater_than,
    '==': lambda left, right: make_bool(equals(left, right)),
    '!=': lambda left, right: make_bool(not equals(left, right)),
}

UNARY_OPERATORS = {
    '-': negate,
    '^': head,
    '$': tail,
}


def binary_op(operator: str, left: Value, right: Value) -> Value:
    return BINARY_OPERATORS[operator](left, right)


def unary_op(operator: str, operand: Value) -> Value:
    return UNARY_OPERATORS[operator](operand)
