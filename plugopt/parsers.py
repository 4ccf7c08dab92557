"""Text parsers convert the raw text of an option value into a python object.

A text parser is any callable with the signature ``(option_name: str, text: str) -> Any``.
Parsers are looked up by option name first, then by value type.
"""

import re
import struct
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from enum import Enum
from fractions import Fraction
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any, get_origin, overload

from attrs import define, field

from plugopt.annotations import is_new_type, resolve_annotated, resolve_new_type, resolve_optional
from plugopt.exceptions import ConversionError, PlugoptError
from plugopt.types import INTEGER_BOUNDS, Byte, Char, Float32, Long, Short
from plugopt.utils import default_name_transform, import_object, is_class_and_subclass

if TYPE_CHECKING:
    from plugopt.option import Option

TextParser = Callable[[str, str], Any]


def _bool(option_name: str, text: str) -> bool:
    s = text.strip().lower()
    if s in {"no", "n", "0", "false", "f", "off"}:
        return False
    elif s in {"yes", "y", "1", "true", "t", "on"}:
        return True
    else:
        # Conservative when coercing strings into boolean.
        raise ValueError(f"expected one of true/false, yes/no, on/off, 1/0; got {text!r}")


def _int(option_name: str, text: str) -> int:
    s = text.strip().lower()
    if s.startswith(("0x", "-0x")):
        return int(s, 16)
    elif s.startswith(("0o", "-0o")):
        return int(s, 8)
    elif s.startswith(("0b", "-0b")):
        return int(s, 2)
    else:
        return int(s)


def _bounded_int(type_: Any, option_name: str, text: str) -> int:
    value = _int(option_name, text)
    low, high = INTEGER_BOUNDS[type_]
    if not low <= value <= high:
        raise ValueError(f"{value} is out of range [{low}, {high}] for {type_.__name__}")
    return value


def _float(option_name: str, text: str) -> float:
    return float(text.strip())


def _float32(option_name: str, text: str) -> float:
    value = _float(option_name, text)
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        raise ValueError(f"{value} is out of range for Float32") from None


def _complex(option_name: str, text: str) -> complex:
    return complex(text.strip().replace(" ", ""))


def _decimal(option_name: str, text: str) -> Decimal:
    try:
        return Decimal(text.strip())
    except InvalidOperation:
        raise ValueError(f"invalid decimal literal {text!r}") from None


def _fraction(option_name: str, text: str) -> Fraction:
    return Fraction(text.strip())


def _char(option_name: str, text: str) -> str:
    if not text:
        raise ValueError("expected a single character, got empty text")
    return text[0]


def _str(option_name: str, text: str) -> str:
    return text


def _bytes(option_name: str, text: str) -> bytes:
    return bytes(text, encoding="utf8")


def _path(option_name: str, text: str) -> Path:
    return Path(text.strip())


def _pattern(option_name: str, text: str) -> re.Pattern:
    return re.compile(text)


def _class(option_name: str, text: str) -> type:
    obj = import_object(text)
    if not isinstance(obj, type):
        raise TypeError(f"{text.strip()!r} is not a class")
    return obj


def _enum(enum_type: type[Enum], option_name: str, text: str) -> Enum:
    """Match text to an enum member, comparing transformed member names."""
    value_transformed = default_name_transform(text.strip())
    for name, member in enum_type.__members__.items():
        if default_name_transform(name) == value_transformed:
            return member
    choices = ", ".join(default_name_transform(name) for name in enum_type.__members__)
    raise ValueError(f"expected one of {{{choices}}}")


def _object(option_name: str, text: str) -> str:
    return text


_default_parsers: dict[Any, TextParser] = {
    bool: _bool,
    int: _int,
    float: _float,
    complex: _complex,
    Decimal: _decimal,
    Fraction: _fraction,
    Byte: partial(_bounded_int, Byte),
    Short: partial(_bounded_int, Short),
    Long: partial(_bounded_int, Long),
    Float32: _float32,
    Char: _char,
    str: _str,
    bytes: _bytes,
    Path: _path,
    re.Pattern: _pattern,
    type: _class,
    object: _object,
}


def _lookup_chain(hint: Any):
    """Yield ``hint`` and successively unwrapped versions of it."""
    seen = []
    while hint not in seen:
        seen.append(hint)
        yield hint
        origin = get_origin(hint)
        if origin is type or origin is re.Pattern:
            hint = origin
        else:
            hint = resolve_annotated(resolve_optional(hint))
            if hint == seen[-1] and is_new_type(hint):
                hint = hint.__supertype__


@define
class TextParserRegistry:
    """Lookup of :data:`TextParser` callables.

    Registration is expected to complete before parsing starts; the registry is not
    safe to mutate while a parse that uses it is in progress.
    """

    by_name: dict[str, TextParser] = field(factory=dict)
    """Parsers keyed by option name; these shadow :attr:`by_type`."""

    by_type: dict[Any, TextParser] = field(factory=lambda: dict(_default_parsers))
    """Parsers keyed by the exact value type."""

    @overload
    def register(self, key: str | Any, parser: TextParser) -> TextParser: ...

    @overload
    def register(self, key: str | Any, parser: None = None) -> Callable[[TextParser], TextParser]: ...

    def register(self, key, parser=None):
        """Register ``parser`` for an option name (:obj:`str` key) or a value type.

        Can be used as a decorator:

        .. code-block:: python

            @registry.register("magic-string")
            def magic(option_name, text):
                return "abc" + text
        """
        if parser is None:
            return partial(self.register, key)

        if isinstance(key, str):
            self.by_name[key] = parser
        else:
            self.by_type[key] = parser
        return parser

    def resolve(self, option: "Option", hint: Any) -> TextParser | None:
        """Find the parser for ``option`` whose value has type ``hint``.

        Resolution order:

        1. A parser registered for ``option.name``.
        2. A parser registered for ``hint`` exactly.
        3. A parser registered for ``hint`` with ``Optional``, ``Annotated`` and ``NewType``
           wrappers removed, one layer at a time.
        4. The built-in member lookup for :class:`~enum.Enum` subclasses.
        """
        if option.name in self.by_name:
            return self.by_name[option.name]

        for candidate in _lookup_chain(hint):
            try:
                return self.by_type[candidate]
            except (KeyError, TypeError):
                continue

        base = resolve_new_type(resolve_annotated(resolve_optional(hint)))
        if is_class_and_subclass(base, Enum):
            return partial(_enum, base)
        return None

    def copy(self) -> "TextParserRegistry":
        return TextParserRegistry(dict(self.by_name), dict(self.by_type))


def parse_text(parser: TextParser, option: "Option", owner: type | None, text: str, target_type: Any = None) -> Any:
    """Invoke ``parser`` on ``text``, wrapping failures in a :class:`.ConversionError`."""
    try:
        return parser(option.name or "", text)
    except PlugoptError:
        raise
    except Exception as e:
        raise ConversionError(option=option, owner=owner, text=text, target_type=target_type) from e
