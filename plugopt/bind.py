"""Greedy, single-pass matching of command-line tokens onto bindable objects."""

from collections.abc import Sequence
from typing import Any

from plugopt.annotations import resolve
from plugopt.defaults import apply_defaults
from plugopt.exceptions import MissingValueError, UnresolvedParserError
from plugopt.field_info import OptionField, get_factory, get_option_fields
from plugopt.parsers import TextParserRegistry, parse_text


def match_tokens(
    obj: Any,
    tokens: Sequence[str],
    start: int,
    registry: TextParserRegistry,
    bound: set[str] | None = None,
) -> int:
    """Bind options of ``obj`` from ``tokens``, starting at index ``start``.

    At every position the pending fields of ``obj`` are tried in declaration order;
    the first field that matches the token wins and is removed from the pending fields,
    so each field binds at most once. Matching stops at the first token no pending
    field recognizes; that token belongs to a sibling or an enclosing scope.

    Parameters
    ----------
    obj: Any
        Bindable object to populate.
    tokens: Sequence[str]
        Complete token sequence; it is never modified.
    start: int
        Index of the first token to consider.
    registry: TextParserRegistry
        Parsers for delimiter-style values.
    bound: set[str] | None
        If provided, the attribute name of every bound field is added to it.

    Returns
    -------
    int
        Number of tokens consumed. ``0`` means the token at ``start`` was not recognized.
    """
    pending = list(get_option_fields(type(obj)))
    index = start
    while index < len(tokens) and pending:
        for option_field in pending:
            consumed = _match_field(obj, option_field, tokens, index, registry)
            if consumed:
                break
        else:
            break
        pending.remove(option_field)
        if bound is not None:
            bound.add(option_field.attribute)
        index += consumed
    return index - start


def _match_field(
    obj: Any,
    option_field: OptionField,
    tokens: Sequence[str],
    index: int,
    registry: TextParserRegistry,
) -> int:
    token = tokens[index]
    if token.strip() == option_field.flag:
        return _bind_flag(obj, option_field, tokens, index, registry)

    text = option_field.option.match(token)
    if text is None:
        return 0
    return _bind_value(obj, option_field, text, tokens, index, registry)


def _bind_flag(
    obj: Any,
    option_field: OptionField,
    tokens: Sequence[str],
    index: int,
    registry: TextParserRegistry,
) -> int:
    if option_field.is_bool:
        option_field.set(obj, True)
        return 1

    if not option_field.composite:
        raise MissingValueError(option=option_field.option, owner=option_field.owner)

    if not option_field.is_collection:
        value, consumed = _bind_nested(option_field, tokens, index + 1, registry)
        option_field.set(obj, value)
        return 1 + consumed

    # Every element re-states the flag: ``-item -x=1 -item -x=2``.
    collection, add = option_field.new_collection()
    cursor = index
    while True:
        element, consumed = _bind_nested(option_field, tokens, cursor + 1, registry)
        add(element)
        cursor += 1 + consumed
        if cursor < len(tokens) and tokens[cursor].strip() == option_field.flag:
            continue
        break
    option_field.set(obj, collection)
    return cursor - index


def _bind_nested(
    option_field: OptionField,
    tokens: Sequence[str],
    start: int,
    registry: TextParserRegistry,
) -> tuple[Any, int]:
    """Construct, populate and complete one nested object for ``option_field``."""
    value = get_factory(resolve(option_field.value_type))()
    bound: set[str] = set()
    consumed = match_tokens(value, tokens, start, registry, bound)
    if not consumed:
        raise MissingValueError(option=option_field.option, owner=option_field.owner)
    apply_defaults(value, registry, bound)
    return value, consumed


def _convert(option_field: OptionField, parser, text: str, target_type: Any, registry: TextParserRegistry) -> Any:
    value = parse_text(parser, option_field.option, option_field.owner, text, target_type)
    if option_field.composite and get_option_fields(type(value)):
        apply_defaults(value, registry)
    return value


def _bind_value(
    obj: Any,
    option_field: OptionField,
    text: str,
    tokens: Sequence[str],
    index: int,
    registry: TextParserRegistry,
) -> int:
    option = option_field.option

    parser = registry.resolve(option, option_field.hint)
    if parser is not None:
        option_field.set(obj, _convert(option_field, parser, text, option_field.hint, registry))
        return 1

    if not option_field.is_collection:
        raise UnresolvedParserError(option=option, owner=option_field.owner, target_type=option_field.hint)

    element_type = option_field.element_type
    parser = registry.resolve(option, element_type)
    if parser is None:
        raise UnresolvedParserError(option=option, owner=option_field.owner, target_type=element_type)

    # Contiguous ``flag=value`` tokens are each one element: ``-tag=a -tag=b``.
    collection, add = option_field.new_collection()
    add(_convert(option_field, parser, text, element_type, registry))
    cursor = index + 1
    while cursor < len(tokens) and (text := option.match(tokens[cursor])) is not None:
        add(_convert(option_field, parser, text, element_type, registry))
        cursor += 1
    option_field.set(obj, collection)
    return cursor - index
