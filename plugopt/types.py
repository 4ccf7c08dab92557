"""Scalar aliases for values with a fixed width.

Python's :class:`int` and :class:`float` are unbounded, so these :func:`~typing.NewType` aliases
let an option declare the range it accepts. The built-in text parsers reject out-of-range values
with a :class:`.ConversionError` and usage text renders them with a short placeholder.

.. code-block:: python

    from typing import Annotated

    from plugopt import Option
    from plugopt.types import Short


    class Config:
        port: Annotated[Short, Option("port")] = None
"""

from typing import NewType

__all__ = [
    "Byte",
    "Char",
    "Float32",
    "Long",
    "Short",
]

Byte = NewType("Byte", int)
"8-bit signed integer."

Short = NewType("Short", int)
"16-bit signed integer."

Long = NewType("Long", int)
"64-bit signed integer."

Float32 = NewType("Float32", float)
"Single precision float; parsed values are rounded to the nearest representable value."

Char = NewType("Char", str)
"Single character."

INTEGER_BOUNDS: dict[object, tuple[int, int]] = {
    Byte: (-(2**7), 2**7 - 1),
    Short: (-(2**15), 2**15 - 1),
    Long: (-(2**63), 2**63 - 1),
}
