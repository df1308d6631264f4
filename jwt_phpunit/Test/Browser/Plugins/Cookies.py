"""Exposes the browser's cookie jar."""

from jwt_phpunit.Test.Browser.Plugin import BrowserPlugin, default_registry


@default_registry.register
class Cookies(BrowserPlugin):
    """
    Invoked as browser.get_cookies().

    Returns the plugin itself, wrapping the session's cookie jar, so jar methods
    pass straight through: browser.get_cookies().get('symfony').
    """

    plugin_name = "cookies"

    def get_method_name(self) -> str:
        return "get_cookies"

    def invoke(self) -> "Cookies":
        if not self.has_encapsulated_object():
            self.set_encapsulated_object(self.get_browser().session.cookies)
        return self

    def has_cookie(self, name: str) -> bool:
        return self.invoke().call_method("get", name) is not None
