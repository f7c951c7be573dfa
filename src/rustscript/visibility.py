from enum import Enum
from typing import Optional


class Visibility(Enum):
    PUBLIC = "pub"
    PRIVATE = "private"


def can_access(referencing_module: Optional['ModulePath'],
               target_module: 'ModulePath',
               visibility: Visibility) -> bool:
    """Decide whether code declared in referencing_module may see a member of target_module.

    Public members are visible everywhere.  Private members are visible only to
    code whose declaration site is exactly target_module: neither outside code
    nor nested submodules get access.  Top-level code has no module (None).
    """
    if visibility is Visibility.PUBLIC:
        return True
    return referencing_module is not None and referencing_module == target_module
