"""
doit tasks for testing RustScript.
Run with: doit
"""

import os
import sys
import time
from pathlib import Path

# Directories
SRC_DIR = 'src'
EXAMPLES_DIR = 'examples'

# Example programs that must run cleanly
EXAMPLES = sorted(str(p) for p in Path(EXAMPLES_DIR).glob('*.rs'))
FAILING_EXAMPLES = [os.path.join(EXAMPLES_DIR, 'private_access.rs')]

# Ackermann benchmark, timed around the call only
BENCH_SETUP = (
    "let ack = fn (m, n) => if (m == 0) then (n + 1) else "
    "(if (n == 0) then (ack(m - 1, 1)) else (ack(m - 1, ack(m, n - 1))))"
)
BENCH_CALL = "ack(3, 8)"

# Python test files
PYTHON_TESTS = sorted(str(p) for p in Path('tests').glob('test_*.py'))


def _rustscript(*args):
    env_path = os.pathsep.join(filter(None, [SRC_DIR, os.environ.get('PYTHONPATH')]))
    return f'PYTHONPATH={env_path} {sys.executable} -m rustscript {" ".join(args)}'


def task_test_python():
    """Run Python tests"""
    def run_python_tests():
        import pytest
        return pytest.main(['-v'] + PYTHON_TESTS) == 0

    return {
        'actions': [run_python_tests],
        'file_dep': PYTHON_TESTS,
        'verbosity': 2,
    }


def task_lint_examples():
    """Parse every example without running it"""
    return {
        'actions': [_rustscript('--lint', *EXAMPLES)],
        'file_dep': EXAMPLES,
        'verbosity': 2,
    }


def task_run_examples():
    """Run each example program"""
    for example in EXAMPLES:
        if example in FAILING_EXAMPLES:
            continue
        yield {
            'name': Path(example).stem,
            'actions': [_rustscript(example)],
            'file_dep': [example],
            'verbosity': 2,
        }


def task_test():
    """Run all tests"""
    return {
        'actions': None,
        'task_dep': ['test_python', 'lint_examples', 'run_examples'],
    }


def task_bench():
    """Time ack(3, 8) on the interpreter"""
    def run_bench():
        from rustscript.interpreter import Interpreter, InterpreterOptions

        interpreter = Interpreter(InterpreterOptions(recursion_limit=200000))
        interpreter.eval_source(BENCH_SETUP, "<bench>")
        start = time.perf_counter()
        result = interpreter.eval_source(BENCH_CALL, "<bench>")
        elapsed = (time.perf_counter() - start) * 1000
        print(f"{BENCH_CALL} = {result.value}")
        print(f"Time: {elapsed:.0f} ms")

    return {
        'actions': [run_bench],
        'verbosity': 2,
        'uptodate': [False],
    }
