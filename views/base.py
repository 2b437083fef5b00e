import logging

import httpx

from .client import ApiClient, ApiError
from .store import Store

logger = logging.getLogger(__name__)

REQUEST_ERRORS = (ApiError, httpx.HTTPError)


class Controller:
    """
    Common plumbing for a page controller.

    A controller loads its resource into ``store``, renders it, and reacts to
    named events (``"submit:add"``, ``"click:row"``, ...). Handlers are wired
    once, after the first successful load; events dispatched before that are
    ignored.
    """

    name = "page"
    key = "id"
    load_errors = REQUEST_ERRORS

    def __init__(self, client: ApiClient):
        self.client = client
        self.store = Store(key=self.key)
        self.handlers = {}
        self.message = None

    # subclasses
    def load(self):
        raise NotImplementedError

    def events(self) -> dict:
        return {}

    def render(self) -> str:
        raise NotImplementedError

    def load_and_initialize(self) -> bool:
        try:
            self.load()
        except self.load_errors as exc:
            logger.error("Failed to load %s: %s", self.name, exc)
            return False
        if not self.handlers:
            self.handlers = self.events()
        return True

    def dispatch(self, event: str, *args, **kwargs):
        handler = self.handlers.get(event)
        if handler is None:
            logger.debug("%s: no handler for %s", self.name, event)
            return None
        return handler(*args, **kwargs)

    def show_message(self, text: str, kind: str = "error"):
        self.message = (text, kind)

    def attempt(self, description: str, call, *args, inline: bool = False, **kwargs):
        """Run an API call; on failure log it, optionally show it inline, and return None."""
        try:
            return call(*args, **kwargs)
        except REQUEST_ERRORS as exc:
            logger.error("%s failed: %s", description, exc)
            if inline:
                self.show_message(str(exc), "error")
            return None
