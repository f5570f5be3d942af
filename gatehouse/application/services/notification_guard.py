"""Fire-and-forget wrapper for notifier calls.

Notification delivery belongs to the host. A failing notifier must never roll
back the state change that triggered it, so failures are logged and dropped
here instead of propagating to the service caller.

Usage:
    await notify_safely(
        logger,
        "password_reset",
        lambda: notifier.send_password_reset(email, token),
        principal_id=str(principal_id),
    )
"""

from collections.abc import Awaitable, Callable
from typing import Any

from gatehouse.domain.protocols import LoggerProtocol


async def notify_safely(
    logger: LoggerProtocol,
    event: str,
    send: Callable[[], Awaitable[None]],
    **context: Any,
) -> bool:
    """Run a notifier call, logging and absorbing any failure.

    Args:
        logger: Logger for the failure record.
        event: Notification name used in the log record.
        send: Zero-argument callable starting the notifier call. Invoked
            inside the guard, so a notifier that raises before returning an
            awaitable is absorbed too.
        **context: Non-secret log context (principal id, recipient count).

    Returns:
        True if the notifier completed, False if it raised.
    """
    try:
        await send()
    except Exception as e:
        logger.error("notification_failed", error=e, notification=event, **context)
        return False
    logger.debug("notification_sent", notification=event, **context)
    return True
