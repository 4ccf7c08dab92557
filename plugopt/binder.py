from collections.abc import Sequence
from typing import Any, TypeVar

from attrs import define, field

from plugopt.bind import match_tokens
from plugopt.defaults import apply_defaults
from plugopt.field_info import get_factory
from plugopt.option import Option
from plugopt.parsers import TextParser, TextParserRegistry
from plugopt.usage import render_usage

T = TypeVar("T")


@define
class Binder:
    """Binds command-line tokens onto a configuration object graph.

    Each binder owns one :class:`.TextParserRegistry`. Register parsers before
    binding; registering while a bind is in progress is not supported.

    .. code-block:: python

        from typing import Annotated

        from plugopt import Binder, Option


        class Config:
            tags: Annotated[list[str], Option("tag")] = None
            count: Annotated[int, Option("count", default="3")] = None


        config, consumed = Binder().parse(Config, ["-tag=a", "-tag=b", "-other"])
        assert config.tags == ["a", "b"]
        assert config.count == 3
        assert consumed == 2
    """

    registry: TextParserRegistry = field(factory=TextParserRegistry)

    def register_parser(self, key: str | Any, parser: TextParser) -> TextParser:
        """Register a parser for an option name (:obj:`str`) or a value type.

        Parsers registered by option name take precedence.
        """
        return self.registry.register(key, parser)

    def bind(self, obj: Any, tokens: Sequence[str], start: int = 0) -> int:
        """Populate ``obj`` from ``tokens[start:]``, then apply defaults and check required options.

        Parameters
        ----------
        obj: Any
            Root bindable object.
        tokens: Sequence[str]
            Command-line tokens.
        start: int
            Index of the first token belonging to ``obj``.

        Returns
        -------
        int
            Number of tokens consumed; ``0`` when ``tokens[start]`` is not one of ``obj``'s options.

        Raises
        ------
        PlugoptError
            On any binding failure. ``obj`` may have been partially modified and should be discarded.
        """
        bound: set[str] = set()
        consumed = match_tokens(obj, tokens, start, self.registry, bound)
        apply_defaults(obj, self.registry, bound)
        return consumed

    def parse(self, cls: type[T], tokens: Sequence[str], start: int = 0) -> tuple[T, int]:
        """Construct a ``cls`` instance and :meth:`bind` it."""
        obj = get_factory(cls)()
        return obj, self.bind(obj, tokens, start)

    def usage(self, root_option: Option, cls: type) -> str:
        return render_usage(root_option, cls)
