"""Test exception routing through ExceptionHandlerRegistry."""

import pytest

from event_kit import (
    DispatchMode,
    Emitter,
    ExceptionHandlerRegistry,
    create_registry,
    get_default_registry,
)


class HandlerError(Exception):
    pass


def failing_handler(value):
    raise HandlerError(value)


# =============================================================================
# Direct dispatch
# =============================================================================


def test_failure_propagates_without_exception_handlers():
    emitter = Emitter()
    emitter.on("x", failing_handler)
    with pytest.raises(HandlerError):
        emitter.emit("x", 1)


def test_failure_stops_remaining_handlers_in_direct_mode(recorder):
    handler = recorder()
    emitter = Emitter()
    emitter.on("x", failing_handler)
    emitter.on("x", handler)
    with pytest.raises(HandlerError):
        emitter.emit("x", 1)
    assert handler.calls == []


# =============================================================================
# Exception-catching dispatch
# =============================================================================


def test_registered_handler_receives_failure(recorder):
    errors = recorder()
    after = recorder()
    emitter = Emitter()
    emitter.on("x", failing_handler)
    emitter.on("x", after)

    Emitter.on_event_handler_exception(errors)
    emitter.emit("x", 7)

    assert len(errors.calls) == 1
    assert isinstance(errors.calls[0], HandlerError)
    assert errors.calls[0].args == (7,)
    assert after.calls == [7]


def test_all_exception_handlers_called_in_order():
    calls = []
    emitter = Emitter()
    emitter.on("x", failing_handler)
    Emitter.on_event_handler_exception(lambda error: calls.append("first"))
    Emitter.on_event_handler_exception(lambda error: calls.append("second"))

    emitter.emit("x", 1)
    assert calls == ["first", "second"]


def test_mode_is_shared_by_every_emitter(recorder):
    errors = recorder()
    emitter1, emitter2 = Emitter(), Emitter()
    emitter1.on("x", failing_handler)
    emitter2.on("x", failing_handler)

    Emitter.on_event_handler_exception(errors)
    emitter1.emit("x", 1)
    emitter2.emit("x", 2)
    assert [error.args for error in errors.calls] == [(1,), (2,)]


def test_last_removal_reverts_to_direct_dispatch(recorder):
    emitter = Emitter()
    emitter.on("x", failing_handler)
    registry = get_default_registry()

    first = Emitter.on_event_handler_exception(recorder())
    second = Emitter.on_event_handler_exception(recorder())
    assert registry.mode == DispatchMode.EXCEPTION_CATCHING

    first.dispose()
    assert registry.mode == DispatchMode.EXCEPTION_CATCHING
    emitter.emit("x", 1)

    second.dispose()
    assert registry.mode == DispatchMode.DIRECT
    with pytest.raises(HandlerError):
        emitter.emit("x", 2)


def test_disposing_registration_twice_removes_once(recorder):
    registry = create_registry()
    a, b = recorder(), recorder()
    registration = registry.add_exception_handler(a)
    registry.add_exception_handler(b)

    registration.dispose()
    registration.dispose()
    assert registry.exception_handlers == [b]


def test_same_handler_registered_twice():
    calls = []

    def on_error(error):
        calls.append(error)

    registry = create_registry()
    first = registry.add_exception_handler(on_error)
    registry.add_exception_handler(on_error)

    first.dispose()
    assert registry.exception_handlers == [on_error]
    assert registry.mode == DispatchMode.EXCEPTION_CATCHING


def test_unregistering_last_handler_mid_emit_reverts_to_direct(recorder):
    """Handlers after the one that unregisters run in direct mode."""
    errors = recorder()
    registration = Emitter.on_event_handler_exception(errors)

    emitter = Emitter()
    emitter.on("x", lambda value: registration.dispose())
    emitter.on("x", failing_handler)

    with pytest.raises(HandlerError):
        emitter.emit("x", 1)
    assert errors.calls == []


def test_registering_first_handler_mid_emit_catches_later_failures(recorder):
    """Handlers after the one that registers run in exception-catching mode."""
    errors = recorder()
    after = recorder()

    emitter = Emitter()
    emitter.on("x", lambda value: Emitter.on_event_handler_exception(errors))
    emitter.on("x", failing_handler)
    emitter.on("x", after)

    emitter.emit("x", 1)
    assert len(errors.calls) == 1
    assert isinstance(errors.calls[0], HandlerError)
    assert after.calls == [1]


def test_failing_exception_handler_propagates():
    def broken(error):
        raise RuntimeError("handler broke")

    emitter = Emitter()
    emitter.on("x", failing_handler)
    Emitter.on_event_handler_exception(broken)
    with pytest.raises(RuntimeError, match="handler broke"):
        emitter.emit("x", 1)


def test_base_exceptions_are_not_intercepted(recorder):
    def interrupt(value):
        raise KeyboardInterrupt

    emitter = Emitter()
    emitter.on("x", interrupt)
    Emitter.on_event_handler_exception(recorder())
    with pytest.raises(KeyboardInterrupt):
        emitter.emit("x")


def test_add_exception_handler_rejects_non_callable():
    with pytest.raises(TypeError):
        create_registry().add_exception_handler("nope")


# =============================================================================
# Registry injection
# =============================================================================


def test_isolated_registry_does_not_touch_default(registry, recorder):
    errors = recorder()
    registry.add_exception_handler(errors)

    isolated = Emitter(registry=registry)
    isolated.on("x", failing_handler)
    isolated.emit("x", 1)
    assert len(errors.calls) == 1

    shared = Emitter()
    shared.on("x", failing_handler)
    assert get_default_registry().mode == DispatchMode.DIRECT
    with pytest.raises(HandlerError):
        shared.emit("x", 2)


def test_default_registry_is_a_singleton():
    registry = get_default_registry()
    assert isinstance(registry, ExceptionHandlerRegistry)
    assert get_default_registry() is registry
    assert Emitter().registry is registry
    assert create_registry() is not registry


def test_dispatch_returns_handler_result(registry):
    assert registry.dispatch(lambda value: value * 2, 21) == 42
    registry.add_exception_handler(lambda error: None)
    assert registry.dispatch(lambda value: value * 2, 21) == 42
    assert registry.dispatch(failing_handler, 1) is None
