"""
Disposal contract and the single-use Disposable handle.

Anything with a callable ``dispose()`` satisfies ``SupportsDispose``, either by
subclassing it or structurally through ``__subclasshook__``.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional


class SupportsDispose(ABC):
    """Base class for resources that need explicit cleanup."""

    __slots__ = ()

    @abstractmethod
    def dispose(self) -> None:
        """Clean up resources."""
        pass

    @classmethod
    def __subclasshook__(cls, C):
        if cls is not SupportsDispose:
            return NotImplemented
        for klass in C.__mro__:
            if "dispose" in klass.__dict__:
                dispose = klass.__dict__["dispose"]
                if isinstance(dispose, (classmethod, staticmethod)):
                    return True
                # dispose = None opts out, the same way __hash__ = None does
                return callable(dispose)
        return NotImplemented

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.dispose()


def is_disposable(obj: Any) -> bool:
    """
    Check if ``obj`` can be released with a no-argument ``dispose()``.

    Falls back to the instance for objects that carry ``dispose`` as an
    attribute rather than a method, such as ``SimpleNamespace(dispose=f)``.
    """
    if isinstance(obj, SupportsDispose):
        return True
    return callable(getattr(obj, "dispose", None))


class Disposable(SupportsDispose):
    """
    A handle to a resource that can be disposed.

    ``Emitter.on`` returns these to represent subscriptions. The disposal
    action runs the first time ``dispose`` is called and never again.
    """

    def __init__(self, disposal_action: Optional[Callable[[], Any]] = None):
        self.disposed = False
        self.disposal_action = disposal_action

    @staticmethod
    def is_disposable(obj: Any) -> bool:
        """Check if ``obj`` implements the disposal contract."""
        return is_disposable(obj)

    def dispose(self) -> None:
        """
        Perform the disposal action.

        Safe to call more than once. The action is dereferenced before it
        runs, so an action that raises is not retried by a later call.
        """
        if self.disposed:
            return

        self.disposed = True
        action, self.disposal_action = self.disposal_action, None
        if callable(action):
            action()

    def __repr__(self):
        state = "disposed" if self.disposed else "active"
        return f"<Disposable {state}>"
