"""Runtime components for event_kit."""

from .disposable import SupportsDispose, Disposable, is_disposable
from .composite import CompositeDisposable
from .registry import (
    DispatchMode,
    ExceptionHandlerRegistry,
    get_default_registry,
    create_registry,
)
from .emitter import Emitter

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
]
