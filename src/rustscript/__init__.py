"""RustScript interpreter package.

Submodules:
- lexer / parser: PLY tokenizer and grammar producing the rustscript_ast tree
- values / primitives: runtime values and operator semantics
- scope / module_table / visibility: name resolution and module privacy
- evaluator: tree-walking evaluator
- builtins: native functions and the prelude
- interpreter: one run (module table, output sink, imports)
- cli: command line front end (run, REPL, lint)
"""

__version__ = "0.1.0"

from rustscript.errors import RustScriptError, ParseError, EvalError
from rustscript.interpreter import Interpreter, InterpreterOptions
from rustscript.values import display

__all__ = [
    "__version__",
    "Interpreter",
    "InterpreterOptions",
    "RustScriptError",
    "ParseError",
    "EvalError",
    "display",
]
