from typing import TYPE_CHECKING, Any, Optional

from attrs import define

from plugopt.annotations import get_hint_name

if TYPE_CHECKING:
    from plugopt.option import Option


__all__ = [
    "ConversionError",
    "InvalidDescriptorError",
    "MissingValueError",
    "PlugoptError",
    "RequiredOptionMissingError",
    "UnresolvedParserError",
    "UnsupportedCollectionKindError",
]


def _type_name(type_: Any) -> str:
    return getattr(type_, "__qualname__", None) or get_hint_name(type_)


@define(kw_only=True)
class PlugoptError(Exception):
    """Root exception for binding errors.

    As PlugoptErrors bubble up the binding call-stack, more information is added to it.
    """

    msg: str | None = None
    """
    If set, override automatic message generation.
    """

    option: Optional["Option"] = None
    """
    :class:`.Option` being processed when the error was raised.
    """

    owner: type | None = None
    """
    Class that declares the offending :attr:`option`.
    """

    plugin: str | None = None
    """
    Flag signature of the plugin whose arguments were being parsed.
    Set by :meth:`.Plugin.parse_argument`.
    """

    @property
    def flag(self) -> str:
        return self.option.flag if self.option is not None else "<unknown>"

    @property
    def owner_name(self) -> str:
        return _type_name(self.owner) if self.owner is not None else "<unknown>"

    def _message(self) -> str:
        return ""

    @property
    def detail(self) -> str:
        """The message without the plugin prefix."""
        return self.msg if self.msg is not None else self._message()

    def __str__(self):
        if self.plugin:
            return f"Error parsing plugin option {self.plugin}: {self.detail}"
        return self.detail


@define(kw_only=True)
class MissingValueError(PlugoptError):
    """An option that requires a value was matched with nothing usable following it."""

    def _message(self):
        return f'Option "{self.flag}" of "{self.owner_name}" must have a value.'


@define(kw_only=True)
class UnresolvedParserError(PlugoptError):
    """No text parser is registered for the option name or its value type."""

    target_type: Any = None
    """Type that a parser was looked up for."""

    def _message(self):
        return (
            f'Text parser not found for option "{self.flag}" of "{self.owner_name}": '
            f"no parser registered for type {get_hint_name(self.target_type)}."
        )


@define(kw_only=True)
class UnsupportedCollectionKindError(PlugoptError):
    """A declared collection type cannot be instantiated."""

    target_type: Any = None
    """Declared collection type."""

    def _message(self):
        return (
            f'Option "{self.flag}" of "{self.owner_name}" declares unsupported '
            f"collection type {get_hint_name(self.target_type)}."
        )


@define(kw_only=True)
class InvalidDescriptorError(PlugoptError):
    """An option is attached to a field whose shape cannot be bound.

    This is a developer error; the message is always provided explicitly.
    """


@define(kw_only=True)
class RequiredOptionMissingError(PlugoptError):
    """A required option received no value and declares no default."""

    def _message(self):
        return f'Required option "{self.flag}" not provided for "{self.owner_name}".'


@define(kw_only=True)
class ConversionError(PlugoptError):
    """A text parser raised while converting an option value."""

    text: str = ""
    """Raw text that failed to convert."""

    target_type: Any = None
    """Intended type to convert into."""

    def _message(self):
        message = f'Invalid value for "{self.flag}": unable to convert "{self.text}"'
        if self.target_type is not None:
            message += f" into {get_hint_name(self.target_type)}"
        message += "."
        if self.__cause__ is not None and str(self.__cause__):
            message += f" {self.__cause__}"
        return message
