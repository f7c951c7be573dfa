import logging
from typing import Dict, List, Optional

import rustscript.rustscript_ast as ast
from rustscript.builtins import number_range
from rustscript.errors import (
    ArityMismatch, DeclarationError, EvalError, ImportFailure, MatchError, NotCallable,
    PrivateAccessDenied, RustScriptError, TypeMismatch, UnboundIdentifier,
)
from rustscript.module_table import PENDING, ModulePath
from rustscript.primitives import binary_op, truthy, unary_op
from rustscript.scope import Resolution, Scope
from rustscript.values import (
    UNIT, Bool, Builtin, Function, ModuleRef, Value, Variant,
    display, is_sequence, make_list, sequence_items,
)
from rustscript.visibility import Visibility, can_access

logger = logging.getLogger(__name__)


class Evaluator:
    """Tree-walking evaluator for one source file.

    Every eval_* method receives the node, the scope it runs in and the
    module its code was declared in (None for top-level code).  The module
    is what visibility checks compare against, so it travels with closures
    rather than with the caller.
    """

    def __init__(self, interpreter, global_scope: Scope, source: str = "<input>"):
        self.interpreter = interpreter
        self.modules = interpreter.modules
        self.global_scope = global_scope
        self.source = source
        self.exports: Dict[str, Value] = {}

    # --- Output ---

    def write(self, text: str) -> None:
        self.interpreter.write(text)

    def read_line(self) -> Optional[str]:
        return self.interpreter.read_line()

    # --- Entry points ---

    def execute(self, program: ast.Program) -> Value:
        """Run top-level statements in order; the value of the last one is returned"""
        result = UNIT
        for statement in program.statements:
            result = self.eval(statement, self.global_scope, None)
        return result

    def eval(self, node, scope: Scope, module: Optional[ModulePath]) -> Value:
        method = getattr(self, f'eval_{node.__class__.__name__}', None)
        if method is None:
            raise EvalError(f"Cannot evaluate node {node.__class__.__name__}", location=node.location)
        try:
            return method(node, scope, module)
        except RustScriptError as e:
            raise e.with_location(node.location)

    def call(self, callee: Value, args: List[Value], node=None) -> Value:
        """Apply a function value to already evaluated arguments"""
        if isinstance(callee, Builtin):
            if callee.arity is not None and len(args) != callee.arity:
                raise ArityMismatch(
                    f"{callee.name} takes {callee.arity} argument(s), got {len(args)}")
            return callee.func(self, args, node)
        if isinstance(callee, Function):
            variant = callee.variants.get(len(args))
            if variant is None:
                expected = ' or '.join(str(arity) for arity in sorted(callee.variants))
                raise ArityMismatch(
                    f"{callee.name or 'Function'} takes {expected} argument(s), got {len(args)}")
            frame = variant.scope.child(name=callee.name or "lambda")
            for param, arg in zip(variant.params, args):
                frame.bind(param, arg)
            return self.eval(variant.body, frame, variant.module)
        raise NotCallable(f"A value of type {callee.type_name} is not callable")

    # --- Name resolution ---

    def _checked(self, resolution: Resolution, name: str, module: Optional[ModulePath]) -> Value:
        owner = resolution.owner
        if owner is not None and not can_access(module, owner.path, resolution.visibility):
            logger.debug(f"Denied access to {owner.path}.{name} from {module or 'top level'}")
            raise PrivateAccessDenied(
                f"'{name}' is private to module {owner.path}",
                notes=[f"Declare it with 'pub let {name}' to use it outside {owner.path}"],
            )
        if resolution.value is PENDING:
            raise UnboundIdentifier(f"'{name}' used before initialization")
        return resolution.value

    def _resolve(self, name: str, scope: Scope, module: Optional[ModulePath]) -> Resolution:
        resolution = scope.lookup(name)
        if resolution is None:
            raise UnboundIdentifier(f"Unbound identifier '{name}'")
        self._checked(resolution, name, module)
        return resolution

    def eval_Identifier(self, node, scope, module):
        return self._resolve(node.name, scope, module).value

    def eval_QualifiedName(self, node, scope, module):
        first, *rest = node.parts
        value = self._resolve(first, scope, module).value
        walked = first
        for part in rest:
            if not isinstance(value, ModuleRef):
                raise TypeMismatch(f"'{walked}' is a {value.type_name}, not a module")
            record = value.record
            member = record.member(part)
            if member is None:
                raise UnboundIdentifier(f"Module {record.path} has no member '{part}'")
            value = self._checked(Resolution(member[0], scope, record, member[1]), part, module)
            walked = f"{walked}.{part}"
        return value

    # --- Literals and lists ---

    def eval_Literal(self, node, scope, module):
        return node.value

    def eval_UnitLiteral(self, node, scope, module):
        return UNIT

    def eval_ListLiteral(self, node, scope, module):
        return make_list(self.eval(element, scope, module) for element in node.elements)

    def eval_RangeLiteral(self, node, scope, module):
        start = self.eval(node.start, scope, module)
        end = self.eval(node.end, scope, module)
        return number_range(start, end)

    def eval_Comprehension(self, node, scope, module):
        iterable = self.eval(node.iterable, scope, module)
        if not is_sequence(iterable):
            raise TypeMismatch(f"Cannot iterate over a value of type {iterable.type_name}")
        results = []
        for item in sequence_items(iterable):
            frame = scope.child(name="comprehension")
            frame.bind(node.variable, item)
            if node.condition is not None and not truthy(self.eval(node.condition, frame, module)):
                continue
            results.append(self.eval(node.element, frame, module))
        return make_list(results)

    # --- Operators ---

    def eval_UnaryOperation(self, node, scope, module):
        return unary_op(node.operator, self.eval(node.operand, scope, module))

    def _expect_bool(self, operator, value):
        if not isinstance(value, Bool):
            raise TypeMismatch(f"Operator '{operator}' expects Bool operands, got {value.type_name}")
        return value

    def eval_BinaryOperation(self, node, scope, module):
        if node.operator in ('&&', '||'):
            left = self._expect_bool(node.operator, self.eval(node.left, scope, module))
            if left.value == (node.operator == '||'):
                return left
            return self._expect_bool(node.operator, self.eval(node.right, scope, module))
        left = self.eval(node.left, scope, module)
        right = self.eval(node.right, scope, module)
        return binary_op(node.operator, left, right)

    # --- Bindings and functions ---

    def _define(self, scope, name, value, is_public):
        if scope.module is not None:
            visibility = Visibility.PUBLIC if is_public else Visibility.PRIVATE
            scope.module.define(name, value, visibility)
            return
        scope.bind(name, value)
        if is_public and scope is self.global_scope:
            self.exports[name] = value

    def eval_LetBinding(self, node, scope, module):
        value = self.eval(node.initializer, scope, module)
        self._define(scope, node.identifier, value, node.is_public)
        return value

    def eval_LambdaExpression(self, node, scope, module):
        variant = Variant(tuple(node.params), node.body, scope, module)
        return Function(node.name, {variant.arity: variant})

    def eval_Variation(self, node, scope, module):
        name = node.identifier
        resolution = self._resolve(name, scope, module)
        existing = resolution.value
        if not isinstance(existing, Function):
            raise TypeMismatch(f"'var {name}' needs an existing function, found {existing.type_name}")
        variant = Variant(tuple(node.function.params), node.function.body, scope, module)
        if variant.arity in existing.variants:
            raise DeclarationError(f"Function '{name}' already has a variation with arity {variant.arity}")
        updated = existing.with_variant(variant)
        if resolution.owner is not None:
            resolution.owner.define(name, updated)
        else:
            resolution.frame.bind(name, updated)
            if resolution.frame is self.global_scope and name in self.exports:
                self.exports[name] = updated
        return updated

    def eval_FunctionCall(self, node, scope, module):
        callee = self.eval(node.callee, scope, module)
        args = [self.eval(argument, scope, module) for argument in node.arguments]
        return self.call(callee, args, node)

    # --- Control flow ---

    def eval_IfExpression(self, node, scope, module):
        if truthy(self.eval(node.condition, scope, module)):
            return self.eval(node.then_branch, scope, module)
        return self.eval(node.else_branch, scope, module)

    def eval_MatchExpression(self, node, scope, module):
        subject = self.eval(node.subject, scope, module)
        for case in node.cases:
            frame = scope.child(name="match")
            frame.bind(case.pattern, subject)
            if case.guard is None or truthy(self.eval(case.guard, frame, module)):
                return self.eval(case.body, frame, module)
        raise MatchError(f"No match arm accepts the value {display(subject, nested=True)}")

    def eval_Block(self, node, scope, module):
        frame = scope.child(name="block")
        result = UNIT
        for statement in node.statements:
            result = self.eval(statement, frame, module)
        return result

    def eval_SequenceExpression(self, node, scope, module):
        frame = scope.child(name="seq")
        result = UNIT
        for element in node.elements:
            result = self.eval(element, frame, module)
        return result

    # --- Modules and imports ---

    def eval_ModuleDeclaration(self, node, scope, module):
        parent = scope.module
        if parent is not None:
            path = parent.path.child(node.name)
        else:
            path = ModulePath(self.source, (node.name,))
        record = self.modules.declare(path, parent)
        ref = ModuleRef(record)
        previous = scope.bindings.get(node.name)
        previous_export = self.exports.get(node.name)
        # top-level modules are always exported
        self._define(scope, node.name, ref, node.is_public or parent is None)

        body_scope = scope.child(module=record, name=f"mod {path}")
        try:
            for statement in node.body:
                if isinstance(statement, (ast.LetBinding, ast.ModuleDeclaration)):
                    name = statement.identifier if isinstance(statement, ast.LetBinding) else statement.name
                    visibility = Visibility.PUBLIC if statement.is_public else Visibility.PRIVATE
                    record.declare(name, visibility)
            for statement in node.body:
                self.eval(statement, body_scope, path)
        except Exception:
            self.modules.remove(path)
            self._restore(scope, node.name, previous, previous_export)
            raise
        return ref

    def _restore(self, scope, name, previous, previous_export):
        """Put back whatever `name` meant before a failed module declaration"""
        if scope.module is not None:
            scope.module.define(name, PENDING)
            return
        if previous is None:
            scope.bindings.pop(name, None)
        else:
            scope.bind(name, previous)
        if scope is self.global_scope:
            if previous_export is None:
                self.exports.pop(name, None)
            else:
                self.exports[name] = previous_export

    def eval_Import(self, node, scope, module):
        exports = self.interpreter.load_import(node.path, self.source)
        for name in node.names:
            if name not in exports:
                raise ImportFailure(f"'{node.path}' does not export '{name}'")
            self._define(scope, name, exports[name], False)
        return UNIT
