"""
Aggregate of disposables released as a group.
"""

from typing import Dict, Optional

from .disposable import SupportsDispose, is_disposable


class CompositeDisposable(SupportsDispose):
    """
    Collects disposables so they can all be disposed together.

    Useful when an object subscribes to several emitters and wants to drop
    every subscription in its own ``dispose``. Membership is by identity, so
    unhashable objects are accepted and equal-but-distinct objects are kept
    apart. The order members are released in is unspecified.
    """

    def __init__(self, *disposables: SupportsDispose):
        self.disposed = False
        # Keyed by id(); values keep the members alive
        self.disposables: Optional[Dict[int, SupportsDispose]] = {}
        self.add(*disposables)

    def dispose(self) -> None:
        """Dispose every member, once. Later calls have no effect."""
        if self.disposed:
            return

        self.disposed = True
        members = list(self.disposables.values())
        try:
            for member in members:
                member.dispose()
        finally:
            self.disposables = None

    def add(self, *disposables: SupportsDispose) -> None:
        """
        Add disposables to be released when this composite is disposed.

        Does nothing once the composite has been disposed. Raises TypeError
        for any argument without a callable ``dispose``.
        """
        if self.disposed:
            return

        for disposable in disposables:
            if not is_disposable(disposable):
                raise TypeError(
                    "Arguments to CompositeDisposable.add must have a .dispose() method"
                )
            self.disposables[id(disposable)] = disposable

    def remove(self, disposable: SupportsDispose) -> None:
        """Remove a member without disposing it."""
        if self.disposed:
            return
        self.disposables.pop(id(disposable), None)

    def delete(self, disposable: SupportsDispose) -> None:
        """Alias of ``remove``."""
        self.remove(disposable)

    def clear(self) -> None:
        """Drop all members. They will not be disposed by ``dispose``."""
        if self.disposed:
            return
        self.disposables.clear()

    def __contains__(self, disposable: object) -> bool:
        return not self.disposed and id(disposable) in self.disposables

    def __repr__(self):
        if self.disposed:
            return "<CompositeDisposable disposed>"
        return f"<CompositeDisposable {len(self.disposables)} members>"
