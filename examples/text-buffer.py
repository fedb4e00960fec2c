"""Observer-style API built on Emitter and CompositeDisposable."""

import asyncio
import sys
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from event_kit import CompositeDisposable, Emitter, configure_logging


class TextBuffer:
    """A tiny buffer that announces edits to its observers."""

    def __init__(self):
        self.text = ""
        self.emitter = Emitter()

    def on_did_change(self, callback):
        return self.emitter.on("did-change", callback)

    def on_will_save(self, callback):
        return self.emitter.on("will-save", callback)

    def insert(self, text):
        self.text += text
        self.emitter.emit("did-change", self.text)

    async def save(self):
        await self.emitter.emit_async("will-save", self.text)
        print(f"  saved {self.text!r}")

    def destroy(self):
        self.emitter.emit("did-destroy")
        self.emitter.dispose()


class StatusBar:
    """Watches a buffer until it is disposed."""

    def __init__(self, buffer):
        self.disposables = CompositeDisposable()
        self.disposables.add(buffer.on_did_change(self.update))

    def update(self, text):
        print(f"  status: {len(text)} chars")

    def dispose(self):
        self.disposables.dispose()


async def format_on_save(text):
    await asyncio.sleep(0.01)
    print(f"  formatted {text!r}")


if __name__ == "__main__":
    configure_logging(level="DEBUG" if "-v" in sys.argv else "WARNING")

    buffer = TextBuffer()
    status_bar = StatusBar(buffer)
    buffer.on_will_save(format_on_save)

    print("=== Editing ===")
    buffer.insert("hello")
    buffer.insert(" world")

    print("\n=== Saving ===")
    asyncio.run(buffer.save())

    print("\n=== Status bar disposed ===")
    status_bar.dispose()
    buffer.insert("!")
    print(f"  listeners left: {buffer.emitter.get_total_listener_count()}")

    buffer.destroy()
    print(f"  emitter disposed: {buffer.emitter.disposed}")
