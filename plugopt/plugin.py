from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from plugopt.binder import Binder
from plugopt.exceptions import InvalidDescriptorError, PlugoptError
from plugopt.option import Option, get_class_option
from plugopt.panel import usage_panel
from plugopt.parsers import TextParser

if TYPE_CHECKING:
    from rich.console import Console


class Plugin:
    """Base class for code-generator plugins configured from command-line options.

    The plugin class is decorated with an :class:`.Option` naming the plugin; its attributes
    declare their own options with :obj:`~typing.Annotated`. The host offers the argument
    vector to :meth:`parse_argument`; when the plugin's flag is found, the plugin instance
    itself is populated.

    .. code-block:: python

        from typing import Annotated

        from plugopt import Option, Plugin


        @Option(prefix="-X", name="my-plugin", description="My custom plugin")
        class MyPlugin(Plugin):
            output: Annotated[str, Option("output", description="Output directory")] = None
            verbose: Annotated[bool, Option("verbose", description="Enable verbose mode")] = False


        plugin = MyPlugin()
        plugin.parse_argument(["-Xmy-plugin", "-output=gen", "-verbose"], 0)  # 3

    Subclasses overriding ``__init__`` must call ``super().__init__()``.
    """

    def __init__(self):
        self._binder = Binder()

    @classmethod
    def get_option(cls) -> Option:
        """The class-level :class:`.Option`.

        Raises
        ------
        InvalidDescriptorError
            If the plugin class was not decorated with an :class:`.Option`.
        """
        option = get_class_option(cls)
        if option is None or not option.name:
            raise InvalidDescriptorError(
                msg=f'Plugin must be decorated with @Option(name=...): "{cls.__module__}.{cls.__qualname__}".',
                owner=cls,
            )
        return option

    @property
    def option_name(self) -> str:
        return self.get_option().name  # pyright: ignore[reportReturnType]

    @property
    def usage(self) -> str:
        return self._binder.usage(self.get_option(), type(self))

    def register_text_parser(self, key: str | Any, parser: TextParser) -> TextParser:
        """Register a parser for an option name (:obj:`str`) or a value type.

        Parsers registered by option name shadow parsers registered by type.
        """
        return self._binder.register_parser(key, parser)

    def parse_argument(self, args: Sequence[str], i: int) -> int:
        """Parse this plugin's options from ``args`` starting at index ``i``.

        Parameters
        ----------
        args: Sequence[str]
            Complete argument vector.
        i: int
            Index of the token the host is offering.

        Returns
        -------
        int
            ``0`` if ``args[i]`` is not this plugin's flag; otherwise the number of tokens
            consumed, including the flag itself.

        Raises
        ------
        PlugoptError
            The plugin's options could not be bound; :attr:`.PlugoptError.plugin` names this plugin.
        """
        option = self.get_option()
        if i >= len(args) or args[i].strip() != option.flag:
            return 0
        try:
            return 1 + self._binder.bind(self, args, i + 1)
        except PlugoptError as e:
            e.plugin = option.flag
            raise

    def print_usage(self, console: "Console | None" = None) -> None:
        """Display :attr:`usage` in a panel titled with the plugin flag."""
        if console is None:
            from rich.console import Console

            console = Console()
        console.print(usage_panel(self.get_option().flag, self.usage))
