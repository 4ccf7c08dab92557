from collections.abc import Collection
from typing import Any

from plugopt.exceptions import RequiredOptionMissingError, UnresolvedParserError
from plugopt.field_info import OptionField, get_option_fields
from plugopt.parsers import TextParserRegistry, parse_text


def parse_default(option_field: OptionField, target_type: Any, registry: TextParserRegistry) -> Any:
    """Parse the default text of ``option_field`` into a value of ``target_type``.

    If the parsed value is itself a bindable object, it is recursively completed
    with :func:`apply_defaults`.
    """
    parser = registry.resolve(option_field.option, target_type)
    if parser is None:
        raise UnresolvedParserError(option=option_field.option, owner=option_field.owner, target_type=target_type)
    value = parse_text(parser, option_field.option, option_field.owner, option_field.option.default, target_type)
    if get_option_fields(type(value)):
        apply_defaults(value, registry)
    return value


def apply_defaults(obj: Any, registry: TextParserRegistry, bound: Collection[str] = ()) -> None:
    """Fill empty option slots of ``obj`` with their defaults and enforce ``required``.

    Fields named in ``bound`` were supplied on the command line and are skipped.
    Of the remaining fields, only empty slots are visited: ``None``, missing, an empty
    collection, or still the class-level declared value. Nested objects created while
    matching tokens have already been completed.

    Parameters
    ----------
    obj: Any
        A bindable object.
    registry: TextParserRegistry
        Parsers used to convert default value text.
    bound: Collection[str]
        Attribute names bound while matching tokens.

    Raises
    ------
    RequiredOptionMissingError
        A required option is empty and declares no default.
    UnresolvedParserError
        No parser exists for a default that has to be parsed.
    ConversionError
        A default's text could not be parsed.
    """
    for option_field in get_option_fields(type(obj)):
        if option_field.attribute in bound or not option_field.is_empty(obj):
            continue

        option = option_field.option
        if not option.default:
            if option.required:
                raise RequiredOptionMissingError(option=option, owner=option_field.owner)
            continue

        if option_field.is_collection and registry.resolve(option, option_field.hint) is None:
            collection, add = option_field.new_collection()
            add(parse_default(option_field, option_field.element_type, registry))
            option_field.set(obj, collection)
        else:
            option_field.set(obj, parse_default(option_field, option_field.hint, registry))
