from gatehouse.infrastructure.notifications.logging_notifier import LoggingNotifier

__all__ = ["LoggingNotifier"]
