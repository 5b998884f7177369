from typing import Mapping
from typing import Sequence
from typing import TypeAlias
from typing import Union

# Recursive types aren't supported in mypy, see
# https://github.com/python/mypy/issues/731
JSONArray: TypeAlias = Sequence["JSONValue"]  # type: ignore
JSONValue: TypeAlias = Union[int, str, float, bool, None, "JSONDict", "JSONArray"]  # type: ignore
JSONDict: TypeAlias = Mapping[str, JSONValue]  # type: ignore


def optional_string(d: JSONDict, key: str) -> None | str:
    """Return d[key] if it's a non-empty string, None otherwise.

    The engine sends references like "job" and "action" as JSON null or leaves
    them out entirely, depending on the operation and the API version.
    """
    value = d.get(key)
    if isinstance(value, str) and value:
        return value
    return None
