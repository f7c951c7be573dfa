from typing import List, Optional


class Node:
    def __init__(self):
        self.parent = None
        self.location = None  # For source locations

    def add_child(self, child):
        """Add a child node and set its parent"""
        if hasattr(child, 'parent'):
            child.parent = self
        return child

    def add_children(self, children):
        return [self.add_child(child) for child in (children or [])]


class Program(Node):
    def __init__(self, statements, source_file="<input>"):
        super().__init__()
        self.statements = self.add_children(statements)
        self.source_file = source_file

    def __repr__(self):
        return f"Program({self.statements})"


class Statement(Node):
    def __init__(self):
        super().__init__()


class Expression(Node):
    def __init__(self):
        super().__init__()

# --- Literals and names ---

class Literal(Expression):
    """A constant; value is already a runtime value"""
    def __init__(self, value):
        super().__init__()
        self.value = value

    def __repr__(self):
        return f"Literal({self.value!r})"


class UnitLiteral(Expression):
    def __repr__(self):
        return "UnitLiteral()"


class Identifier(Expression):
    def __init__(self, name):
        super().__init__()
        self.name = name

    def __repr__(self):
        return f"Identifier({self.name})"


class QualifiedName(Expression):
    """Dotted path such as Math.Inner.f"""
    def __init__(self, parts: List[str]):
        super().__init__()
        self.parts = list(parts)

    @property
    def name(self):
        return '.'.join(self.parts)

    def __repr__(self):
        return f"QualifiedName({self.name})"

# --- Lists ---

class ListLiteral(Expression):
    def __init__(self, elements):
        super().__init__()
        self.elements = self.add_children(elements)

    def __repr__(self):
        return f"ListLiteral({self.elements})"


class RangeLiteral(Expression):
    """[start..end], end exclusive"""
    def __init__(self, start, end):
        super().__init__()
        self.start = self.add_child(start)
        self.end = self.add_child(end)


class Comprehension(Expression):
    """[element for variable in iterable if condition]"""
    def __init__(self, element, variable, iterable, condition=None):
        super().__init__()
        self.element = self.add_child(element)
        self.variable = variable
        self.iterable = self.add_child(iterable)
        self.condition = self.add_child(condition) if condition else None

# --- Operators ---

class UnaryOperation(Expression):
    def __init__(self, operator, operand):
        super().__init__()
        self.operator = operator
        self.operand = self.add_child(operand)

    def __repr__(self):
        return f"UnaryOperation({self.operator}, {self.operand})"


class BinaryOperation(Expression):
    def __init__(self, left, operator, right):
        super().__init__()
        self.left = self.add_child(left)
        self.operator = operator
        self.right = self.add_child(right)

    def __repr__(self):
        return f"BinaryOperation({self.left}, {self.operator}, {self.right})"

# --- Bindings and functions ---

class LetBinding(Expression):
    """let name = initializer; evaluates to the bound value"""
    def __init__(self, identifier, initializer, is_public=False):
        super().__init__()
        self.identifier = identifier
        self.initializer = self.add_child(initializer)
        self.is_public = is_public

    def __repr__(self):
        prefix = "pub " if self.is_public else ""
        return f"{prefix}LetBinding({self.identifier}, {self.initializer})"


class Variation(Statement):
    """var name = fn(...) => ...; adds an arity overload to an existing function"""
    def __init__(self, identifier, function):
        super().__init__()
        self.identifier = identifier
        self.function = self.add_child(function)


class LambdaExpression(Expression):
    def __init__(self, params, body, name: Optional[str] = None):
        super().__init__()
        self.params = list(params)
        self.body = self.add_child(body)
        self.name = name

    def __str__(self):
        return f"fn({', '.join(self.params)})"

    def __repr__(self):
        return f"LambdaExpression({self.params}, {self.body})"


class FunctionCall(Expression):
    def __init__(self, callee, arguments):
        super().__init__()
        self.callee = self.add_child(callee)
        self.arguments = self.add_children(arguments)

    def __repr__(self):
        return f"FunctionCall({self.callee}, {self.arguments})"

# --- Control flow ---

class IfExpression(Expression):
    def __init__(self, condition, then_branch, else_branch):
        super().__init__()
        self.condition = self.add_child(condition)
        self.then_branch = self.add_child(then_branch)
        self.else_branch = self.add_child(else_branch)


class MatchCase(Node):
    """| pattern [and guard] then body; the pattern is a binding name"""
    def __init__(self, pattern, body, guard=None):
        super().__init__()
        self.pattern = pattern
        self.guard = self.add_child(guard) if guard else None
        self.body = self.add_child(body)


class MatchExpression(Expression):
    def __init__(self, subject, cases):
        super().__init__()
        self.subject = self.add_child(subject)
        self.cases = self.add_children(cases)


class Block(Expression):
    """{ ... } evaluated in a fresh scope; value of the last statement"""
    def __init__(self, statements=None):
        super().__init__()
        self.statements = self.add_children(statements)

    def __repr__(self):
        return f"Block({self.statements})"


class SequenceExpression(Expression):
    """seq([...]): elements evaluated in order in one fresh scope"""
    def __init__(self, elements):
        super().__init__()
        self.elements = self.add_children(elements)

    def __repr__(self):
        return f"SequenceExpression({self.elements})"

# --- Modules ---

class ModuleDeclaration(Statement):
    def __init__(self, name, body, is_public=False):
        super().__init__()
        self.name = name
        self.body = self.add_children(body)
        self.is_public = is_public

    def __repr__(self):
        prefix = "pub " if self.is_public else ""
        return f"{prefix}ModuleDeclaration({self.name}, {self.body})"


class Import(Statement):
    """imp a, b from "path" """
    def __init__(self, names, path):
        super().__init__()
        self.names = list(names)
        self.path = path

    def __repr__(self):
        return f"Import({self.names}, {self.path!r})"
