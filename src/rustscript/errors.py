from dataclasses import dataclass, field
from typing import List, Optional, Any
from pathlib import Path

@dataclass
class SourceLocation:
    """Location in source code"""
    file: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"

@dataclass(eq=False)
class RustScriptError(Exception):
    """Error with source location and context"""
    message: str
    error_type: str = "RustScriptError"
    location: Optional[SourceLocation] = None
    node: Optional[Any] = None  # AST node if available
    context: Optional[str] = None
    notes: List[str] = field(default_factory=list)  # Additional notes/hints

    def __str__(self) -> str:
        parts = []

        loc = str(self.location) if self.location else "unknown location"
        parts.append(f"{self.error_type} at {loc}: {self.message}")

        if self.context:
            parts.append("\nContext:")
            parts.append(self.context)

        if self.notes:
            parts.append("\nNotes:")
            parts.extend(f"  - {note}" for note in self.notes)

        return "\n".join(parts)

    def with_location(self, location: Optional[SourceLocation]) -> 'RustScriptError':
        """Attach a location unless a more precise one is already set"""
        if self.location is None and location is not None:
            self.location = location
            self.context = get_source_context(location.file, location.line)
        return self

@dataclass(eq=False)
class ParseError(RustScriptError):
    error_type: str = "ParseError"

@dataclass(eq=False)
class EvalError(RustScriptError):
    """Base class for every runtime error raised by the evaluator"""
    error_type: str = "EvalError"

@dataclass(eq=False)
class UnboundIdentifier(EvalError):
    error_type: str = "UnboundIdentifier"

@dataclass(eq=False)
class PrivateAccessDenied(EvalError):
    error_type: str = "PrivateAccessDenied"

@dataclass(eq=False)
class NotCallable(EvalError):
    error_type: str = "NotCallable"

@dataclass(eq=False)
class TypeMismatch(EvalError):
    error_type: str = "TypeMismatch"

@dataclass(eq=False)
class ArityMismatch(EvalError):
    error_type: str = "ArityMismatch"

@dataclass(eq=False)
class DeclarationError(EvalError):
    error_type: str = "DeclarationError"

@dataclass(eq=False)
class InvalidArgument(EvalError):
    error_type: str = "InvalidArgument"

@dataclass(eq=False)
class DivisionByZero(EvalError):
    error_type: str = "DivisionByZero"

@dataclass(eq=False)
class MatchError(EvalError):
    error_type: str = "MatchError"

@dataclass(eq=False)
class ImportFailure(EvalError):
    error_type: str = "ImportFailure"

@dataclass(eq=False)
class RecursionLimitExceeded(EvalError):
    error_type: str = "RecursionLimitExceeded"

def get_source_context(file_path: str, line: int, context_lines: int = 2) -> Optional[str]:
    """Get source code context around a location"""
    try:
        path = Path(file_path)
        if not path.is_file():
            return None
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return None

    start = max(0, line - context_lines - 1)
    end = min(len(lines), line + context_lines)

    context = []
    for i in range(start, end):
        line_num = i + 1
        prefix = '> ' if line_num == line else '  '
        context.append(f"{prefix}{line_num:4d} | {lines[i].rstrip()}")

    return '\n'.join(context) if context else None
