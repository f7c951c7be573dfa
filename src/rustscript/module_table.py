import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from rustscript.errors import DeclarationError, ImportFailure
from rustscript.visibility import Visibility

logger = logging.getLogger(__name__)


class _Pending:
    """Placeholder for a member whose initializer has not run yet"""

    def __repr__(self):
        return "<pending>"


PENDING = _Pending()


@dataclass(frozen=True)
class ModulePath:
    """Fully qualified module name, including the source it was declared in"""
    source: str
    names: Tuple[str, ...]

    def child(self, name: str) -> 'ModulePath':
        return ModulePath(self.source, self.names + (name,))

    def __str__(self) -> str:
        return '.'.join(self.names)


@dataclass(eq=False)
class ModuleRecord:
    """Members of one module, split into public and private tiers"""
    path: ModulePath
    parent: Optional['ModuleRecord'] = None
    public: Dict[str, object] = field(default_factory=dict)
    private: Dict[str, object] = field(default_factory=dict)

    def _tier(self, visibility: Visibility) -> Dict[str, object]:
        return self.public if visibility is Visibility.PUBLIC else self.private

    def declare(self, name: str, visibility: Visibility) -> None:
        """Register a member as pending.

        A later `let` of the same name shadows the earlier one, so repeating a
        name is fine as long as its visibility stays the same.
        """
        current = self.visibility_of(name)
        if current is visibility:
            return
        if current is not None:
            raise DeclarationError(
                f"Member '{name}' of module {self.path} is declared both pub and private")
        self._tier(visibility)[name] = PENDING

    def define(self, name: str, value, visibility: Optional[Visibility] = None) -> None:
        """Set a member's value, keeping the tier it was declared in"""
        current = self.visibility_of(name)
        if current is None:
            current = visibility or Visibility.PRIVATE
        self._tier(current)[name] = value

    def visibility_of(self, name: str) -> Optional[Visibility]:
        if name in self.public:
            return Visibility.PUBLIC
        if name in self.private:
            return Visibility.PRIVATE
        return None

    def member(self, name: str) -> Optional[Tuple[object, Visibility]]:
        visibility = self.visibility_of(name)
        if visibility is None:
            return None
        return self._tier(visibility)[name], visibility

    def names(self, visibility: Optional[Visibility] = None) -> List[str]:
        if visibility is None:
            return list(self.public) + list(self.private)
        return list(self._tier(visibility))


@dataclass
class LoadedFile:
    """A source file evaluated during this run and the names it exports"""
    path: Path
    exports: Dict[str, object]


class ModuleTable:
    """Registry of every module and imported file of one interpreter run"""

    def __init__(self):
        self.modules: Dict[ModulePath, ModuleRecord] = {}
        self.files: Dict[Path, LoadedFile] = {}
        self._loading_stack: List[Path] = []  # Track file loading order

    def declare(self, path: ModulePath, parent: Optional[ModuleRecord] = None) -> ModuleRecord:
        if path in self.modules:
            raise DeclarationError(f"Module {path} is already declared in {path.source}")
        record = ModuleRecord(path=path, parent=parent)
        self.modules[path] = record
        logger.debug(f"Declared module {path} ({path.source})")
        return record

    def lookup(self, path: ModulePath) -> Optional[ModuleRecord]:
        return self.modules.get(path)

    def remove(self, path: ModulePath) -> None:
        """Drop a module and every submodule declared under it"""
        depth = len(path.names)
        doomed = [p for p in self.modules
                  if p.source == path.source and p.names[:depth] == path.names]
        for p in doomed:
            del self.modules[p]
        logger.debug(f"Removed module {path} ({len(doomed)} record(s))")

    def begin_loading(self, path: Path) -> None:
        """Mark a file as being loaded, detecting circular imports"""
        if path in self._loading_stack:
            chain = ' -> '.join(str(p) for p in self._loading_stack + [path])
            raise ImportFailure(f"Circular import detected: {chain}")
        self._loading_stack.append(path)

    def finish_loading(self, path: Path, exports: Dict[str, object]) -> LoadedFile:
        self._loading_stack.remove(path)
        loaded = LoadedFile(path=path, exports=exports)
        self.files[path] = loaded
        return loaded

    def abort_loading(self, path: Path) -> None:
        if path in self._loading_stack:
            self._loading_stack.remove(path)

    def loaded_file(self, path: Path) -> Optional[LoadedFile]:
        return self.files.get(path)
