import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, TextIO

from rustscript import __version__
from rustscript.errors import RustScriptError
from rustscript.interpreter import Interpreter, InterpreterOptions
from rustscript.parser import Parser
from rustscript.values import Unit, display

logger = logging.getLogger(__name__)

PROMPT = '> '


def run_files(files: List[str], options: InterpreterOptions) -> int:
    """Run each file in a fresh interpreter, stopping at the first failure"""
    for file in files:
        interpreter = Interpreter(options)
        try:
            interpreter.run_file(file)
        except RustScriptError as e:
            sys.stdout.flush()
            print(str(e), file=sys.stderr)
            return 1
        except OSError as e:
            print(f"Cannot read {file}: {e.strerror or e}", file=sys.stderr)
            return 1
    return 0


def lint_files(files: List[str]) -> int:
    """Parse every file without running it and report syntax errors"""
    parser = Parser()
    failed = 0
    for file in files:
        try:
            parser.parse(Path(file).read_text(encoding="utf-8"), file_path=file)
        except RustScriptError as e:
            failed += 1
            print(str(e))
            continue
        except OSError as e:
            failed += 1
            print(f"Cannot read {file}: {e.strerror or e}")
            continue
        print(f"{file}: ok")
    print(f"Checked {len(files)} file(s), {failed} with errors")
    return 1 if failed else 0


def repl(options: InterpreterOptions, stdin: Optional[TextIO] = None,
         stdout: Optional[TextIO] = None) -> int:
    """Read-eval-print loop; errors are reported and the loop continues"""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    interpreter = Interpreter(options, output=stdout, input_stream=stdin)
    while True:
        stdout.write(PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line:
            stdout.write('\n')
            return 0
        if not line.strip():
            continue
        try:
            result = interpreter.eval_source(line, "<repl>")
        except RustScriptError as e:
            print(str(e), file=stdout)
            continue
        if options.echo_results and not isinstance(result, Unit):
            print(display(result, nested=True), file=stdout)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point"""
    parser = argparse.ArgumentParser(prog="rustscript", description="RustScript interpreter")
    parser.add_argument('files', nargs='*', help='Source files to run')
    parser.add_argument('--repl', '-r', action='store_true',
                        help='Start an interactive session')
    parser.add_argument('--lint', '-l', action='store_true',
                        help='Check files for syntax errors without running them')
    parser.add_argument('--version', '-v', action='version',
                        version=f'%(prog)s {__version__}')
    parser.add_argument('--debug', '-g', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--recursion-limit', type=int, default=InterpreterOptions.recursion_limit,
                        help='Maximum nesting of evaluation (default: %(default)s)')

    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(name)s - %(levelname)s - %(message)s',
        )

    options = InterpreterOptions(recursion_limit=args.recursion_limit)

    if args.lint:
        if not args.files:
            parser.error("--lint needs at least one file")
        return lint_files(args.files)

    if args.repl:
        return repl(replace(options, echo_results=True))

    if not args.files:
        parser.print_help()
        return 2

    return run_files(args.files, options)
