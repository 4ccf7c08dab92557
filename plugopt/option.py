import re
from functools import lru_cache
from typing import Any, TypeVar, get_args, get_origin

from attrs import field

from plugopt.annotations import is_annotated, is_union, resolve_annotated, resolve_optional
from plugopt.types import Byte, Char, Float32, Long, Short
from plugopt.utils import frozen

T = TypeVar("T")

_TYPE_PLACEHOLDERS: dict[Any, str] = {
    bool: "bool",
    int: "int",
    float: "float",
    complex: "complex",
    Byte: "byte",
    Short: "short",
    Long: "long",
    Float32: "float",
    Char: "char",
    re.Pattern: "regex",
    type: "class",
}

DEFAULT_PLACEHOLDER = "value"


@lru_cache(maxsize=256)
def delimiter_pattern(flag: str, delimiter: str) -> re.Pattern:
    """Pattern matching ``<flag><whitespace><delimiter><value>``; group 1 captures the value."""
    return re.compile(rf"^{re.escape(flag)}\s*{re.escape(delimiter)}(.*)$", re.DOTALL)


def type_placeholder(hint: Any) -> str:
    """Short lowercase placeholder for values of type ``hint``.

    Parameters
    ----------
    hint: Any
        Value type. :obj:`~typing.Annotated` and :obj:`~typing.Optional` wrappers are ignored.

    Returns
    -------
    str
        Placeholder text without angle brackets, e.g. ``"int"``.
        Types without a known placeholder return ``"value"``.
    """
    hint = resolve_annotated(resolve_optional(resolve_annotated(hint)))
    if get_origin(hint) is type:
        return "class"
    if get_origin(hint) is re.Pattern or hint is re.Pattern:
        return "regex"
    try:
        return _TYPE_PLACEHOLDERS[hint]
    except (KeyError, TypeError):
        return DEFAULT_PLACEHOLDER


@frozen
class Option:
    """Declarative metadata for a bindable attribute or a plugin class.

    Attach to attributes with :obj:`~typing.Annotated`:

    .. code-block:: python

        from typing import Annotated

        from plugopt import Option, Plugin


        @Option(prefix="-X", name="name-convert", description="Enable name conversion.")
        class NameConvertPlugin(Plugin):
            converter: Annotated[type, Option("name-converter", description="Custom converter class.")] = None
            verbose: Annotated[bool, Option("verbose")] = False

    .. code-block:: console

        $ xjc -Xname-convert -name-converter=my.pkg.Converter -verbose schema.xsd
    """

    name: str | None = None
    """Option name; the token prefix is prepended to form the flag.

    Attributes may omit it, in which case the attribute name is transformed with
    :func:`~plugopt.utils.default_name_transform`.
    """

    prefix: str = field(default="-", kw_only=True)

    delimiter: str = field(default="=", kw_only=True)

    required: bool = field(default=False, kw_only=True)

    default: str = field(default="", kw_only=True)
    """Default value *text*. Parsed with the same text parser as a supplied value."""

    placeholder: str = field(default="", kw_only=True)

    description: str = field(default="", kw_only=True)

    @property
    def flag(self) -> str:
        """The literal token that selects this option, ``prefix + name``."""
        return f"{self.prefix}{self.name or ''}"

    @property
    def pattern(self) -> re.Pattern:
        return delimiter_pattern(self.flag, self.delimiter)

    def match(self, token: str) -> str | None:
        """Return the value text if ``token`` is a delimiter-style occurrence of this option."""
        if m := self.pattern.match(token):
            return m.group(1)
        return None

    def display_placeholder(self, hint: Any) -> str:
        return self.placeholder or type_placeholder(hint)

    def __call__(self, obj: T) -> T:
        """Decorator interface for declaring the option of a plugin class.

        .. code-block:: python

            @Option(prefix="-X", name="my-plugin")
            class MyPlugin(Plugin): ...
        """
        obj.__plugopt__ = self  # pyright: ignore[reportAttributeAccessIssue]
        return obj


def get_class_option(cls: type) -> Option | None:
    """Class-level :class:`Option` declared with the decorator interface, if any."""
    return getattr(cls, "__plugopt__", None)


def find_option(hint: Any) -> Option | None:
    """Extract the last :class:`Option` from an :obj:`~typing.Annotated` hint.

    ``Optional[Annotated[...]]`` is also searched.
    """
    if is_union(hint):
        for arg in get_args(hint):
            if (option := find_option(arg)) is not None:
                return option
        return None
    if not is_annotated(hint):
        return None
    for metadata in reversed(get_args(hint)[1:]):
        if isinstance(metadata, Option):
            return metadata
    return None
