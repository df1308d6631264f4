"""
Browser Plugin Module

Plugins extend the test Browser without subclassing it: each plugin wraps a
helper object and is reached through a single method name on the browser.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type, Union

from jwt_phpunit.exceptions import InvalidArgumentError
from jwt_phpunit.Test.ObjectWrapper import ObjectWrapper, load_class

PLUGIN_NAMESPACE = "BrowserPlugin"


def ucfirst(name: str) -> str:
    return name[:1].upper() + name[1:]


class BrowserPlugin(ObjectWrapper, ABC):
    """Used to extend the functionality of Browser."""

    # Short name used to register the plugin, e.g. 'json' for BrowserPlugin_Json
    plugin_name: Optional[str] = None

    def __init__(self, browser: Any):
        """
        Bind the plugin to its browser.

        Args:
            browser: The Browser this plugin belongs to, for its whole lifetime
        """
        self._browser = browser
        self.initialize()

    @abstractmethod
    def get_method_name(self) -> str:
        """
        Returns the name of the accessor that will invoke this plugin.

        For example, if this method returns 'get_magic', then the plugin can be
        invoked in a test case by calling browser.get_magic().
        """

    @abstractmethod
    def invoke(self, *args, **kwargs) -> Any:
        """Invokes the plugin."""

    def initialize(self) -> None:
        """
        Initialize the plugin.

        This gets called when the plugin is instantiated and before every browser
        request. It should clear out any values from the previous request.
        """
        self.set_encapsulated_object(None)

    def get_browser(self) -> Any:
        return self._browser


class PluginRegistry:
    """Maps plugin names to plugin classes."""

    def __init__(self,
                 namespace: str = PLUGIN_NAMESPACE,
                 base: Type[BrowserPlugin] = BrowserPlugin):
        self.namespace = namespace
        self.base = base
        self._plugins: Dict[str, type] = {}

    def register(self, cls: type, name: Optional[str] = None) -> type:
        """
        Register a class, by default as '<namespace>_<Plugin name>'.

        Returns the class, so this can be used as a decorator.
        """
        if name is None:
            name = f"{self.namespace}_{ucfirst(getattr(cls, 'plugin_name', None) or cls.__name__)}"

        self._plugins[name] = cls
        return cls

    def __contains__(self, name: str) -> bool:
        return name in self._plugins

    def _lookup(self, name: str) -> Optional[type]:
        if name in self._plugins:
            return self._plugins[name]

        if "." in name or ":" in name:
            return load_class(name)

        return None

    def resolve_name(self, name: Union[str, type]) -> type:
        """
        Given a plugin name, attempts to determine the corresponding class.

        The name is tried as-is (registered name or dotted class path) first,
        then as '<namespace>_<Name>'.

        Args:
            name: Plugin name, registered name, dotted class path or class

        Returns:
            The plugin class

        Raises:
            InvalidArgumentError: if no such plugin exists or it is not a plugin class
        """
        if isinstance(name, type):
            candidate = name
            name = candidate.__name__
        elif not isinstance(name, str):
            raise InvalidArgumentError(
                f"Invalid {type(name).__name__} encountered; string expected."
            )
        else:
            candidate = self._lookup(name)
            if candidate is None:
                altname = f"{self.namespace}_{ucfirst(name)}"
                candidate = self._lookup(altname)
                if candidate is None:
                    raise InvalidArgumentError(
                        f'Unable to locate a plugin named "{name}" (tried "{name}" and "{altname}").'
                    )
                name = altname

        if not (isinstance(candidate, type)
                and issubclass(candidate, self.base)
                and candidate is not self.base):
            raise InvalidArgumentError(f"{name} is not a valid {self.base.__name__} class.")

        return candidate


default_registry = PluginRegistry()
