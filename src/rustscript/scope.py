from dataclasses import dataclass
from typing import Dict, Optional

from rustscript.visibility import Visibility


@dataclass
class Resolution:
    """Result of looking a name up in a scope chain.

    owner is the module record the name was found in, or None for an ordinary
    lexical binding; the evaluator checks visibility whenever owner is set.
    """
    value: object
    frame: 'Scope'
    owner: Optional['ModuleRecord'] = None
    visibility: Visibility = Visibility.PUBLIC


class Scope:
    """A frame of bindings with a link to its enclosing frame.

    A frame attached to a module record (a module body) resolves names
    against the record's members before its own bindings.
    """

    def __init__(self, parent: Optional['Scope'] = None, module=None, name: str = "scope"):
        self.parent = parent
        self.module = module
        self.name = name
        self.bindings: Dict[str, object] = {}

    def child(self, module=None, name: str = "scope") -> 'Scope':
        return Scope(parent=self, module=module, name=name)

    def bind(self, name: str, value) -> None:
        """Bind name in this frame, replacing any earlier binding of the same name here"""
        self.bindings[name] = value

    def lookup(self, name: str) -> Optional[Resolution]:
        """Look up a name in this scope or parent scopes; innermost wins"""
        current = self
        while current:
            if current.module is not None:
                member = current.module.member(name)
                if member is not None:
                    value, visibility = member
                    return Resolution(value, current, current.module, visibility)
            if name in current.bindings:
                return Resolution(current.bindings[name], current)
            current = current.parent
        return None

    def __repr__(self):
        return f"Scope({self.name}, {sorted(self.bindings)})"
