from collections import defaultdict
import logging
from typing import Callable, DefaultDict, List, NamedTuple, Type


Handler = Callable[[object], None]


class _Subscription(NamedTuple):
    priority: int
    order: int
    handler: Handler


class EventBus:
    """Synchronous in-process dispatch of domain events.

    Handlers run in ascending priority, ties broken by registration order. A
    failing handler is logged and skipped; the commit that published the event
    has already happened and is never undone by a listener.
    """

    def __init__(self) -> None:
        self._subscriptions: DefaultDict[Type[object], List[_Subscription]] = defaultdict(list)
        self._registered = 0
        self._errors: List[Exception] = []
        self._logger = logging.getLogger(__name__)

    def subscribe(self, event_type: Type[object], handler: Handler, *, priority: int = 100) -> None:
        rows = self._subscriptions[event_type]
        rows.append(_Subscription(int(priority), self._registered, handler))
        rows.sort(key=lambda row: (row.priority, row.order))
        self._registered += 1

    def handler_count(self, event_type: Type[object]) -> int:
        return len(self._subscriptions.get(event_type, ()))

    def publish(self, event: object) -> None:
        self._errors = []
        event_name = type(event).__name__
        for subscription in list(self._subscriptions.get(type(event), ())):
            try:
                subscription.handler(event)
            except Exception as exc:
                self._errors.append(exc)
                self._logger.exception(
                    "Handler for %s failed; continuing with remaining handlers",
                    event_name,
                    extra={
                        "event_type": event_name,
                        "handler": getattr(subscription.handler, "__qualname__", repr(subscription.handler)),
                        "priority": subscription.priority,
                    },
                )

    def last_publish_errors(self) -> List[Exception]:
        return list(self._errors)
