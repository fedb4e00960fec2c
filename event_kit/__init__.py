"""
event_kit: in-process events with deterministic, idempotent disposal.

Usage:
    from event_kit import Emitter, CompositeDisposable

    emitter = Emitter()
    subscriptions = CompositeDisposable()
    subscriptions.add(emitter.on("did-change", print))

    emitter.emit("did-change", 42)
    subscriptions.dispose()
"""

from ._runtime import (
    SupportsDispose,
    Disposable,
    is_disposable,
    CompositeDisposable,
    DispatchMode,
    ExceptionHandlerRegistry,
    get_default_registry,
    create_registry,
    Emitter,
)
from ._log import configure_logging

__version__ = "0.1.0"

__all__ = [
    "SupportsDispose",
    "Disposable",
    "is_disposable",
    "CompositeDisposable",
    "DispatchMode",
    "ExceptionHandlerRegistry",
    "get_default_registry",
    "create_registry",
    "Emitter",
    "configure_logging",
]
