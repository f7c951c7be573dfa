"""Native functions and the RustScript prelude.

Every native receives (evaluator, args, node).  List helpers that take a
function are native so that long lists do not recurse through the
evaluator once per element.
"""
import logging
import re

from rustscript.errors import InvalidArgument, TypeMismatch
from rustscript.primitives import truthy
from rustscript.scope import Scope
from rustscript.values import (
    UNIT, Builtin, Char, ListValue, Number, Str,
    display, is_sequence, make_bool, make_list, sequence_items, type_of,
)

logger = logging.getLogger(__name__)

PRELUDE = """
let sum = fn(ls) => fold(fn(a, b) => a + b, 0, ls)
let product = fn(ls) => fold(fn(a, b) => a * b, 1, ls)
let has = fn(val) => typeof(val) != "Unit"
"""

_INTEGER = re.compile(r'^[+-]?\d+$')

NATIVES = {}


def native(name, arity=None):
    """Register a function as a builtin under name"""
    def register(func):
        NATIVES[name] = Builtin(name, arity, func)
        return func
    return register


def _expect_text(name, value):
    if isinstance(value, (Str, Char)):
        return value.value
    raise TypeMismatch(f"{name} expects a Str, got {value.type_name}")


def _expect_int(name, value):
    if isinstance(value, Number) and value.is_integral:
        return value.value
    raise TypeMismatch(f"{name} expects an integer, got {display(value)}")


def _expect_sequence(name, value):
    if not is_sequence(value):
        raise TypeMismatch(f"{name} expects a List, got {value.type_name}")
    return sequence_items(value)


def number_range(start, end):
    """Integers from start up to, not including, end"""
    low = _expect_int("range", start)
    high = _expect_int("range", end)
    return ListValue(tuple(Number(i) for i in range(low, high)))

# --- Input and output ---

@native("print")
def builtin_print(evaluator, args, node):
    evaluator.write(' '.join(display(arg) for arg in args))
    return UNIT


@native("println")
def builtin_println(evaluator, args, node):
    evaluator.write(' '.join(display(arg) for arg in args) + '\n')
    return UNIT


@native("input", 1)
def builtin_input(evaluator, args, node):
    evaluator.write(display(args[0]))
    line = evaluator.read_line()
    if line is None:
        return UNIT
    return Str(line.rstrip('\r\n'))

# --- Reflection and strings ---

@native("typeof", 1)
def builtin_typeof(evaluator, args, node):
    return Str(type_of(args[0]))


@native("upper", 1)
def builtin_upper(evaluator, args, node):
    value = args[0]
    text = _expect_text("upper", value).upper()
    return Char(text) if isinstance(value, Char) and len(text) == 1 else Str(text)


@native("lower", 1)
def builtin_lower(evaluator, args, node):
    value = args[0]
    text = _expect_text("lower", value).lower()
    return Char(text) if isinstance(value, Char) and len(text) == 1 else Str(text)


@native("substr", 3)
def builtin_substr(evaluator, args, node):
    text = _expect_text("substr", args[0])
    begin = _expect_int("substr", args[1])
    end = _expect_int("substr", args[2])
    if not 0 <= begin <= end <= len(text):
        raise InvalidArgument(f"substr range [{begin}, {end}) is out of bounds for a string of length {len(text)}")
    return Str(text[begin:end])


@native("parseVal", 1)
def builtin_parse_val(evaluator, args, node):
    text = _expect_text("parseVal", args[0]).strip()
    if _INTEGER.match(text):
        return Number(int(text))
    return UNIT


@native("parseBool", 1)
def builtin_parse_bool(evaluator, args, node):
    text = _expect_text("parseBool", args[0]).strip()
    if text in ('true', 'false'):
        return make_bool(text == 'true')
    return UNIT

# --- Lists ---

@native("range", 2)
def builtin_range(evaluator, args, node):
    return number_range(args[0], args[1])


@native("fmap", 2)
def builtin_fmap(evaluator, args, node):
    function, items = args[0], _expect_sequence("fmap", args[1])
    return make_list(evaluator.call(function, [item], node) for item in items)


@native("filter", 2)
def builtin_filter(evaluator, args, node):
    function, items = args[0], _expect_sequence("filter", args[1])
    return make_list(item for item in items if truthy(evaluator.call(function, [item], node)))


@native("fold", 3)
def builtin_fold(evaluator, args, node):
    function, accumulator = args[0], args[1]
    for item in _expect_sequence("fold", args[2]):
        accumulator = evaluator.call(function, [accumulator, item], node)
    return accumulator


@native("reverse", 1)
def builtin_reverse(evaluator, args, node):
    value = args[0]
    if isinstance(value, Str):
        return Str(value.value[::-1])
    return ListValue(tuple(reversed(_expect_sequence("reverse", value))))


@native("seq", 1)
def builtin_seq(evaluator, args, node):
    items = _expect_sequence("seq", args[0])
    return items[-1] if items else UNIT


def create_builtin_scope() -> Scope:
    """Outermost frame holding every native; user code may shadow any of them"""
    scope = Scope(name="builtins")
    for name, builtin in NATIVES.items():
        scope.bind(name, builtin)
    logger.debug(f"Registered {len(NATIVES)} builtins")
    return scope
