import inspect

from plugopt.annotations import resolve
from plugopt.field_info import get_field_descriptions, get_option_fields
from plugopt.option import Option

INDENT = "    "
LINE_PREFIX = "  "
COLUMN_DELIMITER = "        :  "

UsageEntry = tuple[str, list[str]]


def _description_lines(option: Option, fallback: str = "", *, repeatable: bool = False) -> list[str]:
    parts = []
    if description := inspect.cleandoc(option.description or fallback):
        parts.append(description)
    if option.required:
        parts.append("[required]")
    if option.default:
        parts.append(f"[default={option.default}]")
    if repeatable:
        parts.append("[repeatable]")
    return " ".join(parts).splitlines() or [""]


def _collect(cls: type, indent: str, entries: list[UsageEntry]) -> None:
    descriptions = get_field_descriptions(cls)
    for option_field in get_option_fields(cls):
        option = option_field.option
        signature = f"{indent}{option.flag}"
        if not option_field.composite:
            signature += f"{option.delimiter}<{option.display_placeholder(option_field.value_type)}>"
        entries.append(
            (
                signature,
                _description_lines(
                    option,
                    descriptions.get(option_field.attribute, ""),
                    repeatable=option_field.is_collection,
                ),
            )
        )
        if option_field.composite:
            _collect(resolve(option_field.value_type), indent + INDENT, entries)


def usage_entries(root_option: Option, cls: type) -> list[UsageEntry]:
    """Ordered ``(signature, description_lines)`` pairs for ``root_option`` and the options of ``cls``.

    The root entry comes first; option entries follow in declaration order, nested
    options directly after their parent with a deeper indentation.
    """
    entries: list[UsageEntry] = [(root_option.flag, _description_lines(root_option))]
    _collect(cls, INDENT, entries)
    return entries


def format_usage(entries: list[UsageEntry]) -> str:
    """Align ``entries`` into columns.

    Every signature is padded to the longest signature, followed by the column
    delimiter and the first description line. Continuation lines are indented to
    the description column.
    """
    width = max((len(signature) for signature, _ in entries), default=0)
    column = len(LINE_PREFIX) + width + len(COLUMN_DELIMITER)
    lines = []
    for signature, descriptions in entries:
        first, *rest = descriptions
        lines.append(f"{LINE_PREFIX}{signature.ljust(width)}{COLUMN_DELIMITER}{first}")
        lines.extend(" " * column + line for line in rest)
    return "\n".join(lines)


def render_usage(root_option: Option, cls: type) -> str:
    """Render aligned usage text for ``root_option`` and the options of ``cls``.

    Example output:

    .. code-block:: text

          -Xname-convert                     :  Enable name conversion.
              -name-converter=<class>        :  Custom converter class.
              -class-name                    :  Class name rules. [repeatable]
                  -token=<value>             :  The original identifier to match.
                  -name=<value>              :  The target mapping name. [required]
    """
    return format_usage(usage_entries(root_option, cls))
