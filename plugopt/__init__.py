__version__ = "0.1.0"

__all__ = [
    "Binder",
    "ConversionError",
    "InvalidDescriptorError",
    "MissingValueError",
    "Option",
    "OptionField",
    "Plugin",
    "PluginHost",
    "PlugoptError",
    "RequiredOptionMissingError",
    "TextParser",
    "TextParserRegistry",
    "UnresolvedParserError",
    "UnsupportedCollectionKindError",
    "apply_defaults",
    "default_name_transform",
    "error_panel",
    "get_option_fields",
    "match_tokens",
    "render_usage",
    "types",
]

from plugopt import types
from plugopt.bind import match_tokens
from plugopt.binder import Binder
from plugopt.defaults import apply_defaults
from plugopt.exceptions import (
    ConversionError,
    InvalidDescriptorError,
    MissingValueError,
    PlugoptError,
    RequiredOptionMissingError,
    UnresolvedParserError,
    UnsupportedCollectionKindError,
)
from plugopt.field_info import OptionField, get_option_fields
from plugopt.host import PluginHost
from plugopt.option import Option
from plugopt.panel import error_panel
from plugopt.parsers import TextParser, TextParserRegistry
from plugopt.plugin import Plugin
from plugopt.usage import render_usage
from plugopt.utils import default_name_transform
