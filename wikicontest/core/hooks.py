"""
Listener registry for store events.
Listeners run synchronously in registration order; a failing listener is logged and skipped.
"""

from typing import Callable, Dict, List

from ..util.logging import logger

SUBMISSION_CREATED = "submission_created"

listeners: Dict[str, Dict[str, Callable]] = {}  # event -> {listener_name: func}


def register_listener(event: str, name: str, func: Callable):
    """
    Register a callback for an event.

    Args:
        event: Event name, e.g. SUBMISSION_CREATED
        name: Unique listener identifier within the event
        func: Callable invoked with the event's arguments
    """
    if not callable(func):
        raise ValueError(f"Listener must be callable: {func}")

    listeners.setdefault(event, {})[name] = func
    logger.debug(f"Registered listener '{name}' for '{event}'")


def unregister_listener(event: str, name: str):
    """Remove a listener from the registry."""
    if name in listeners.get(event, {}):
        del listeners[event][name]


def list_listeners(event: str) -> List[str]:
    """Return listener names registered for an event."""
    return list(listeners.get(event, {}).keys())


def clear_listeners():
    listeners.clear()


def fire(event: str, *args) -> List[str]:
    """
    Call every listener registered for the event.

    Returns the names of listeners that failed. Failures never propagate to
    the caller, the store write that fired the event has already committed.
    """
    failed = []
    for name, func in list(listeners.get(event, {}).items()):
        try:
            func(*args)
        except Exception as e:
            logger.log_hook_failure(event, name, e)
            failed.append(name)
    return failed
