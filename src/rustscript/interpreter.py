import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, TextIO, Union

from rustscript.builtins import PRELUDE, create_builtin_scope
from rustscript.errors import ImportFailure, RecursionLimitExceeded
from rustscript.evaluator import Evaluator
from rustscript.module_table import ModuleTable
from rustscript.parser import Parser
import rustscript.rustscript_ast as ast
from rustscript.values import Value

logger = logging.getLogger(__name__)


@dataclass
class InterpreterOptions:
    """Runtime options for RustScript"""
    recursion_limit: int = 10000  # Python frames available to nested evaluation
    load_prelude: bool = True
    echo_results: bool = False  # REPL prints non-Unit results


class Interpreter:
    """Main interpreter interface for RustScript.

    One instance is one run: it owns the module table, the output sink and
    the chain builtins -> prelude -> global scope that programs execute in.
    """

    def __init__(self, options: InterpreterOptions = None,
                 output: Optional[TextIO] = None, input_stream: Optional[TextIO] = None):
        self.options = options or InterpreterOptions()
        self.output = output if output is not None else sys.stdout
        self.input = input_stream if input_stream is not None else sys.stdin
        self.parser = Parser()
        self.modules = ModuleTable()
        self.builtins = create_builtin_scope()
        self.prelude = self.builtins.child(name="prelude")
        self.global_scope = self.prelude.child(name="global")
        if self.options.load_prelude:
            self._load_prelude()

    def _load_prelude(self):
        program = self.parser.parse(PRELUDE, file_path="<prelude>")
        Evaluator(self, self.prelude, "<prelude>").execute(program)
        logger.debug(f"Loaded prelude: {sorted(self.prelude.bindings)}")

    # --- Output sink ---

    def write(self, text: str) -> None:
        self.output.write(text)

    def read_line(self) -> Optional[str]:
        self.output.flush()
        line = self.input.readline()
        return line if line else None

    # --- Running code ---

    def parse(self, source: str, file_path: str = "<input>") -> ast.Program:
        return self.parser.parse(source, file_path=file_path)

    def eval_source(self, source: str, file_path: str = "<input>") -> Value:
        """Parse and evaluate source in the global scope, returning the last statement's value"""
        program = self.parse(source, file_path)
        evaluator = Evaluator(self, self.global_scope, file_path)
        return self._guarded(lambda: evaluator.execute(program))

    def run_file(self, filepath: Union[str, Path]) -> Value:
        """Evaluate a RustScript source file"""
        path = Path(filepath)
        logger.debug(f"Running {path}")
        source = path.read_text(encoding="utf-8")
        resolved = path.resolve()
        self.modules.begin_loading(resolved)
        try:
            program = self.parse(source, str(path))
            evaluator = Evaluator(self, self.global_scope, str(path))
            result = self._guarded(lambda: evaluator.execute(program))
        except Exception:
            self.modules.abort_loading(resolved)
            raise
        self.modules.finish_loading(resolved, evaluator.exports)
        return result

    def _guarded(self, run):
        previous = sys.getrecursionlimit()
        sys.setrecursionlimit(max(previous, self.options.recursion_limit))
        try:
            return run()
        except RecursionError as e:
            raise RecursionLimitExceeded(
                "Maximum recursion depth exceeded",
                notes=[f"Recursion limit is {self.options.recursion_limit}; "
                       f"raise it with --recursion-limit"],
            ) from e
        finally:
            sys.setrecursionlimit(previous)

    # --- Imports ---

    def resolve_import(self, relative: str, importing_source: str) -> Path:
        if importing_source.startswith('<'):
            base = Path.cwd()
        else:
            base = Path(importing_source).parent
        return (base / relative).resolve()

    def load_import(self, relative: str, importing_source: str) -> Dict[str, Value]:
        """Load a file once per run and return its exported names"""
        path = self.resolve_import(relative, importing_source)
        loaded = self.modules.loaded_file(path)
        if loaded is not None:
            return loaded.exports
        if not path.is_file():
            raise ImportFailure(f"Cannot find '{relative}'", notes=[f"Looked for {path}"])

        self.modules.begin_loading(path)
        logger.debug(f"Importing {path}")
        try:
            program = self.parse(path.read_text(encoding="utf-8"), str(path))
            evaluator = Evaluator(self, self.prelude.child(name=f"global {path.name}"), str(path))
            evaluator.execute(program)
        except Exception:
            self.modules.abort_loading(path)
            raise
        return self.modules.finish_loading(path, evaluator.exports).exports
