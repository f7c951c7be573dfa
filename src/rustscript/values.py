"""Runtime values.

Values are immutable once produced; only scope bindings change.  Strings are
their own kind but behave as lists of chars wherever a list is expected.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, Union

from rustscript.escapes import escape


class Value:
    """Marker base class for every runtime value"""
    type_name = "Value"


@dataclass(frozen=True)
class Number(Value):
    value: Union[int, float]
    type_name = "Number"

    @property
    def is_integral(self) -> bool:
        return isinstance(self.value, int)


@dataclass(frozen=True)
class Str(Value):
    value: str
    type_name = "Str"


@dataclass(frozen=True)
class Char(Value):
    value: str
    type_name = "Char"


@dataclass(frozen=True)
class Bool(Value):
    value: bool
    type_name = "Bool"


@dataclass(frozen=True)
class Unit(Value):
    type_name = "Unit"


@dataclass(frozen=True)
class ListValue(Value):
    items: Tuple[Value, ...] = ()
    type_name = "List"


@dataclass(frozen=True)
class Variant:
    """One arity of a function: parameters, body and the captured environment"""
    params: Tuple[str, ...]
    body: Any                   # AST expression
    scope: Any                  # defining Scope, captured by reference
    module: Optional[Any]       # declaration-site ModulePath

    @property
    def arity(self) -> int:
        return len(self.params)


@dataclass(eq=False, frozen=True)
class Function(Value):
    """User-defined closure; overloads are keyed by arity"""
    name: Optional[str]
    variants: Dict[int, Variant] = field(default_factory=dict)
    type_name = "Lambda"

    def with_variant(self, variant: Variant) -> 'Function':
        variants = dict(self.variants)
        variants[variant.arity] = variant
        return Function(self.name, variants)


@dataclass(eq=False, frozen=True)
class Builtin(Value):
    """Native function; arity None means variadic.

    func is called as func(evaluator, args, node).
    """
    name: str
    arity: Optional[int]
    func: Callable
    type_name = "Lambda"


@dataclass(frozen=True)
class ModuleRef(Value):
    record: Any  # ModuleRecord, compared by identity
    type_name = "Module"


UNIT = Unit()
TRUE = Bool(True)
FALSE = Bool(False)


def make_bool(value: bool) -> Bool:
    return TRUE if value else FALSE


def make_list(items) -> Value:
    """Build a list value; a non-empty list made only of chars becomes a Str"""
    items = tuple(items)
    if items and all(isinstance(item, Char) for item in items):
        return Str(''.join(item.value for item in items))
    return ListValue(items)


def is_sequence(value: Value) -> bool:
    return isinstance(value, (ListValue, Str))


def sequence_items(value: Value) -> Tuple[Value, ...]:
    if isinstance(value, Str):
        return tuple(Char(c) for c in value.value)
    return value.items


def type_of(value: Value) -> str:
    return value.type_name


def format_number(value: Union[int, float]) -> str:
    if isinstance(value, float):
        return repr(value)
    return str(value)


def display(value: Value, nested: bool = False) -> str:
    """Render a value for output; strings and chars are quoted only inside lists"""
    if isinstance(value, Number):
        return format_number(value.value)
    if isinstance(value, Str):
        return f'"{escape(value.value)}"' if nested else value.value
    if isinstance(value, Char):
        return f"'{escape(value.value)}'" if nested else value.value
    if isinstance(value, Bool):
        return 'true' if value.value else 'false'
    if isinstance(value, Unit):
        return '()'
    if isinstance(value, ListValue):
        return '[' + ', '.join(display(item, nested=True) for item in value.items) + ']'
    if isinstance(value, (Function, Builtin)):
        return f"<fn {value.name or 'anonymous'}>"
    if isinstance(value, ModuleRef):
        return f"<mod {value.record.path}>"
    return repr(value)
