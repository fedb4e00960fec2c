"""
Exception-handler registry shared by emitters.

Emitters route handler invocations through ``registry.dispatch``. While no
exception handlers are registered that is a plain call; once one is
registered, failures are caught and forwarded to every registered handler.
"""

from enum import IntEnum
from typing import Any, Callable, List, Optional

from .disposable import Disposable
from .._log import get_logger

logger = get_logger(__name__)

ExceptionHandler = Callable[[Exception], Any]


class DispatchMode(IntEnum):
    """How handlers are invoked during emission."""
    DIRECT = 0  # Failures propagate to the emitter's caller
    EXCEPTION_CATCHING = 1  # Failures go to the registered exception handlers


class ExceptionHandlerRegistry:
    """
    Ordered list of exception handlers plus the dispatch function they imply.

    The last removal of a handler switches dispatch back to direct calls.
    """

    def __init__(self):
        self.exception_handlers: List[ExceptionHandler] = []
        self.dispatch: Callable[[Callable, Any], Any] = self.simple_dispatch

    @property
    def mode(self) -> DispatchMode:
        if self.dispatch == self.exception_handling_dispatch:
            return DispatchMode.EXCEPTION_CATCHING
        return DispatchMode.DIRECT

    def add_exception_handler(self, exception_handler: ExceptionHandler) -> Disposable:
        """
        Register a handler for exceptions raised by event handlers.

        Returns a Disposable that unregisters it.
        """
        if not callable(exception_handler):
            raise TypeError("Exception handler must be callable")

        if not self.exception_handlers:
            self.dispatch = self.exception_handling_dispatch
        self.exception_handlers.append(exception_handler)
        logger.debug(
            "registry.handler_added",
            handlers=len(self.exception_handlers),
            mode=self.mode.name,
        )
        return Disposable(lambda: self.remove_exception_handler(exception_handler))

    def remove_exception_handler(self, exception_handler: ExceptionHandler) -> None:
        """Unregister the first occurrence of ``exception_handler``."""
        try:
            self.exception_handlers.remove(exception_handler)
        except ValueError:
            return

        if not self.exception_handlers:
            self.dispatch = self.simple_dispatch
        logger.debug(
            "registry.handler_removed",
            handlers=len(self.exception_handlers),
            mode=self.mode.name,
        )

    def handle_exception(self, exception: Exception) -> None:
        """Forward ``exception`` to every registered handler, in order."""
        logger.error(
            "registry.handler_exception",
            error=repr(exception),
            handlers=len(self.exception_handlers),
            exc_info=exception,
        )
        for exception_handler in list(self.exception_handlers):
            exception_handler(exception)

    def simple_dispatch(self, handler: Callable, value: Any) -> Any:
        return handler(value)

    def exception_handling_dispatch(self, handler: Callable, value: Any) -> Any:
        try:
            return handler(value)
        except Exception as e:
            self.handle_exception(e)
            return None


# Process-wide default registry
_default_registry: Optional[ExceptionHandlerRegistry] = None


def get_default_registry() -> ExceptionHandlerRegistry:
    """Get or create the default registry."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ExceptionHandlerRegistry()
    return _default_registry


def create_registry() -> ExceptionHandlerRegistry:
    """Create an isolated registry."""
    return ExceptionHandlerRegistry()
