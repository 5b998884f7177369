from enum import Enum
from typing import TypeVar

from delphixci.errors import UndefinedOperationError
from delphixci.messages import undefined_operation

# What the build step forms send when nothing is selected
NULL_SELECTION = "NULL"

E = TypeVar("E", bound=Enum)


class BookmarkOperation(Enum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"
    SHARE = "Share"


class ContainerOperation(Enum):
    REFRESH = "Refresh"
    RESET = "Reset"
    RESTORE = "Restore"
    UNDO = "Undo"
    ENABLE = "Enable"
    DISABLE = "Disable"


class ProvisionType(Enum):
    BOOKMARK = "Bookmark"
    SNAPSHOT = "Snapshot"


def parse_operation(enum_type: type[E], value: str, what: str) -> E:
    for member in enum_type:
        if member.value.lower() == value.strip().lower():
            return member
    raise UndefinedOperationError(undefined_operation(what, value))
