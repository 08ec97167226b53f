# Vehicle axis conventions
# FORBIDDEN: logging, any I/O

from types import MappingProxyType
from typing import Mapping

from .errors import InvalidParameter

# ISO 8855 style body axes, shared by every model and by the theory engine
AXES: Mapping[str, str] = MappingProxyType({
    "x": "forward",
    "y": "left",
    "z": "up",
    "yaw": "counter-clockwise",
})


def assert_conventions(conventions: Mapping[str, str]) -> None:
    """Check that a model declares the shared axis conventions.

    Args:
        conventions: Axis name to direction mapping declared by a model

    Raises:
        InvalidParameter: On any missing or different axis
    """
    mismatches = []
    for axis, direction in AXES.items():
        declared = conventions.get(axis)
        if declared != direction:
            mismatches.append(f"{axis}: expected {direction!r}, got {declared!r}")
    if mismatches:
        raise InvalidParameter("Axis convention mismatch: " + "; ".join(mismatches))
