import sys
from collections.abc import Iterable
from typing import TYPE_CHECKING, Optional

from attrs import define, field

from plugopt.exceptions import PlugoptError
from plugopt.panel import error_panel
from plugopt.plugin import Plugin
from plugopt.utils import create_error_console_from_console

if TYPE_CHECKING:
    from rich.console import Console


@define
class PluginHost:
    """Offers an argument vector to a set of plugins, the way a compiler host does.

    .. code-block:: python

        host = PluginHost([NameConvertPlugin(), NamespacePlugin()])
        leftovers = host.parse_arguments(sys.argv[1:])
    """

    plugins: list[Plugin] = field(factory=list, converter=list)

    _console: Optional["Console"] = field(default=None, kw_only=True, alias="console")
    """Console for usage output. Defaults to a new :class:`~rich.console.Console`."""

    _error_console: Optional["Console"] = field(default=None, kw_only=True, alias="error_console")
    """Console for error panels. Defaults to a stderr console derived from :attr:`console`."""

    print_error: bool = field(default=True, kw_only=True)

    exit_on_error: bool = field(default=True, kw_only=True)

    usage_on_error: bool = field(default=False, kw_only=True)
    """Also print the failing plugin's usage when binding fails."""

    @property
    def console(self) -> "Console":
        if self._console is None:
            from rich.console import Console

            self._console = Console()
        return self._console

    @property
    def error_console(self) -> "Console":
        if self._error_console is None:
            self._error_console = create_error_console_from_console(self.console)
        return self._error_console

    def register(self, plugin: Plugin) -> Plugin:
        self.plugins.append(plugin)
        return plugin

    def plugin_usage(self) -> str:
        """Usage text of every registered plugin, separated by blank lines."""
        return "\n\n".join(plugin.usage for plugin in self.plugins)

    def parse_arguments(
        self,
        args: Iterable[str],
        *,
        print_error: bool | None = None,
        exit_on_error: bool | None = None,
    ) -> list[str]:
        """Let every plugin consume its options from ``args``.

        At each position, plugins are asked in registration order; the first plugin that
        consumes tokens wins. Tokens no plugin claims are returned to the caller.

        Parameters
        ----------
        args: Iterable[str]
            Argument vector, without the program name.
        print_error: bool | None
            Print a rich panel describing a binding error to :attr:`error_console`.
            If :obj:`None`, uses :attr:`print_error`.
        exit_on_error: bool | None
            Call :func:`sys.exit` with status ``1`` on a binding error.
            If :obj:`None`, uses :attr:`exit_on_error`.

        Returns
        -------
        list[str]
            Tokens not consumed by any plugin, in order.
        """
        tokens = list(args)
        unused = []
        i = 0
        plugin = None
        try:
            while i < len(tokens):
                for plugin in self.plugins:
                    consumed = plugin.parse_argument(tokens, i)
                    if consumed:
                        i += consumed
                        break
                else:
                    unused.append(tokens[i])
                    i += 1
        except PlugoptError as e:
            if self.usage_on_error and plugin is not None:
                plugin.print_usage(self.error_console)
            if print_error if print_error is not None else self.print_error:
                self.error_console.print(error_panel(e))
            if exit_on_error if exit_on_error is not None else self.exit_on_error:
                sys.exit(1)
            raise
        return unused
