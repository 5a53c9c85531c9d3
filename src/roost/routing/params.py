"""Route pattern parameters and type conversion.

Built-in converters for pattern segments like ``{id:int}`` in route
names such as ``/user/{id:int}``.
"""

from typing import Any

# (regex_pattern, converter) for each supported parameter type
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"-?\d+", int),
    "float": (r"-?\d+(?:\.\d+)?", float),
    "path": (r".+", str),
}


def convert_param(value: str, param_type: str) -> Any:
    """Convert a captured segment to the parameter's declared type.

    Raises ``ValueError`` if the string cannot be converted.
    Raises ``KeyError`` if *param_type* is not a registered converter.
    """
    _, target_type = CONVERTERS[param_type]
    return target_type(value)


def convert_params(raw: dict[str, str], types: dict[str, str]) -> dict[str, Any]:
    """Convert every captured parameter in *raw* using its declared type."""
    return {name: convert_param(value, types.get(name, "str")) for name, value in raw.items()}
