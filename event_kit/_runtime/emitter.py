"""
Named-event emitter with disposable subscriptions.

Every subscription handle is tracked in the emitter's own CompositeDisposable,
so disposing or clearing the emitter releases all of them at once.
"""

from typing import Any, Callable, Dict, List, Optional
import asyncio
import inspect

from .disposable import Disposable, SupportsDispose
from .composite import CompositeDisposable
from .registry import (
    ExceptionHandler,
    ExceptionHandlerRegistry,
    get_default_registry,
)
from .._log import get_logger

logger = get_logger(__name__)

Handler = Callable[[Any], Any]


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class _Cursor:
    """Position of an in-flight ``emit_async`` in a live handler list."""

    __slots__ = ("handlers", "index")

    def __init__(self, handlers: List[Handler]):
        self.handlers = handlers
        self.index = 0


class Emitter(SupportsDispose):
    """
    Broadcasts values to handlers subscribed by event name.

    Usage:
        class User:
            def __init__(self):
                self.emitter = Emitter()

            def on_did_change_name(self, callback):
                return self.emitter.on("did-change-name", callback)

            def set_name(self, name):
                self.name = name
                self.emitter.emit("did-change-name", name)

            def destroy(self):
                self.emitter.dispose()

    Handlers are invoked through the emitter's ExceptionHandlerRegistry, which
    defaults to the process-wide one. A registry with exception handlers
    catches handler failures; without them failures reach the caller of
    ``emit``.
    """

    def __init__(self, registry: Optional[ExceptionHandlerRegistry] = None):
        self.disposed = False
        self.registry = registry if registry is not None else get_default_registry()
        self.subscriptions: Optional[CompositeDisposable] = None
        self.handlers_by_event_name: Optional[Dict[str, List[Handler]]] = None
        self._cursors: List[_Cursor] = []
        self.clear()

    @classmethod
    def on_event_handler_exception(cls, exception_handler: ExceptionHandler) -> Disposable:
        """
        Register an exception handler on the process-wide registry.

        Affects every emitter using the default registry. Returns a
        Disposable that unregisters it.
        """
        return get_default_registry().add_exception_handler(exception_handler)

    # Construction and destruction

    def clear(self) -> None:
        """
        Dispose all outstanding subscriptions and forget every handler.

        The emitter stays usable. Has no effect once disposed.
        """
        if self.disposed:
            return

        if self.subscriptions is not None:
            self.subscriptions.dispose()
        self.subscriptions = CompositeDisposable()
        self.handlers_by_event_name = {}
        logger.debug("emitter.cleared")

    def dispose(self) -> None:
        """Release all subscriptions and stop accepting new ones."""
        if self.disposed:
            return

        self.subscriptions.dispose()
        self.handlers_by_event_name = None
        self.disposed = True
        logger.debug("emitter.disposed")

    # Event subscription

    def _check_subscribable(self, handler: Handler) -> None:
        if self.disposed:
            raise RuntimeError("Emitter has been disposed")
        if not callable(handler):
            raise TypeError("Handler must be callable")

    def on(self, event_name: str, handler: Handler, unshift: bool = False) -> Disposable:
        """
        Register ``handler`` to be called with the value of each emission.

        Args:
            event_name: Name of the event to subscribe to
            handler: Callable taking the emitted value
            unshift: Call this handler before those already registered

        Returns:
            A Disposable that unsubscribes the handler
        """
        self._check_subscribable(handler)

        handlers = self.handlers_by_event_name.get(event_name)
        if handlers is None:
            self.handlers_by_event_name[event_name] = [handler]
        elif unshift:
            handlers.insert(0, handler)
            for cursor in self._cursors:
                if cursor.handlers is handlers:
                    cursor.index += 1
        else:
            handlers.append(handler)

        def cleanup():
            self.subscriptions.remove(subscription)
            self.off(event_name, handler)

        subscription = Disposable(cleanup)
        self.subscriptions.add(subscription)
        logger.debug(
            "emitter.subscribed",
            event_name=event_name,
            handler_name=_handler_name(handler),
            unshift=unshift,
        )
        return subscription

    def preempt(self, event_name: str, handler: Handler) -> Disposable:
        """Register ``handler`` ahead of all current handlers for the event."""
        return self.on(event_name, handler, True)

    def once(self, event_name: str, handler: Handler, unshift: bool = False) -> Disposable:
        """Register ``handler`` to be called for the next emission only."""
        self._check_subscribable(handler)

        def wrapped(value):
            subscription.dispose()
            return handler(value)

        subscription = self.on(event_name, wrapped, unshift)
        return subscription

    def off(self, event_name: str, handler: Handler) -> None:
        """Remove the first registration of ``handler`` for the event."""
        if self.disposed:
            return

        handlers = self.handlers_by_event_name.get(event_name)
        if not handlers:
            return

        try:
            index = handlers.index(handler)
        except ValueError:
            return

        del handlers[index]
        for cursor in self._cursors:
            if cursor.handlers is handlers and cursor.index > index:
                cursor.index -= 1

        if not handlers:
            del self.handlers_by_event_name[event_name]
        logger.debug(
            "emitter.unsubscribed",
            event_name=event_name,
            handler_name=_handler_name(handler),
        )

    # Event emission

    def _handlers_for(self, event_name: str) -> Optional[List[Handler]]:
        if self.handlers_by_event_name is None:
            return None
        return self.handlers_by_event_name.get(event_name)

    def emit(self, event_name: str, value: Any = None) -> None:
        """
        Call every handler for ``event_name`` with ``value``.

        Handlers are taken from a snapshot, so subscribing or unsubscribing
        from inside a handler only affects later emissions.
        """
        handlers = self._handlers_for(event_name)
        if not handlers:
            return

        for handler in tuple(handlers):
            self.registry.dispatch(handler, value)

    async def emit_async(self, event_name: str, value: Any = None) -> None:
        """
        Call every handler for ``event_name`` and await the awaitables they return.

        Unlike ``emit`` this walks the live handler list: a handler subscribed
        during dispatch is called in the same pass, and one unsubscribed
        before its turn is skipped. Completes once every returned awaitable
        has settled. Failures are raised, or routed to the registry's
        exception handlers when it has any.
        """
        handlers = self._handlers_for(event_name)
        if not handlers:
            return

        cursor = _Cursor(handlers)
        self._cursors.append(cursor)
        pending = []
        try:
            while cursor.index < len(handlers):
                handler = handlers[cursor.index]
                cursor.index += 1
                result = self.registry.dispatch(handler, value)
                if inspect.isawaitable(result):
                    pending.append(result)
        except BaseException:
            for awaitable in pending:
                if inspect.iscoroutine(awaitable):
                    awaitable.close()
            raise
        finally:
            self._cursors.remove(cursor)

        if not pending:
            return

        outcomes = await asyncio.gather(*pending, return_exceptions=True)
        for outcome in outcomes:
            if not isinstance(outcome, BaseException):
                continue
            if isinstance(outcome, Exception) and self.registry.exception_handlers:
                self.registry.handle_exception(outcome)
            else:
                raise outcome

    # Introspection

    def get_event_names(self) -> List[str]:
        """Names of events that currently have handlers."""
        if self.handlers_by_event_name is None:
            return []
        return list(self.handlers_by_event_name)

    def listener_count_for_event_name(self, event_name: str) -> int:
        handlers = self._handlers_for(event_name)
        return len(handlers) if handlers else 0

    def get_total_listener_count(self) -> int:
        if self.handlers_by_event_name is None:
            return 0
        return sum(len(handlers) for handlers in self.handlers_by_event_name.values())
