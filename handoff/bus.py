from collections.abc import Iterable
from itertools import chain
from queue import Queue
from typing import Any


class Bus:
    """Deliver published events to in-process subscribers.

    Each subscriber is a queue that receives every event that is an
    instance of one of the types it subscribed to.
    """

    def __init__(self):
        self.__subscriptions: dict[type, set[Queue[Any]]] = {}

    def __bool__(self):
        return bool(self.__subscriptions)

    def subscribe[T](self, types: Iterable[type[T]]) -> Queue[T]:
        queue = Queue[T]()
        for type in types:
            self.__subscriptions.setdefault(type, set()).add(queue)
        return queue

    def unsubscribe(self, queue: Queue) -> None:
        """Unsubscribe a queue from all event types."""
        for type, subscriptions in list(self.__subscriptions.items()):
            subscriptions.discard(queue)
            if not subscriptions:
                del self.__subscriptions[type]
        queue.shutdown(immediate=True)

    def publish(self, event: Any):
        subscribers = {
            subscription
            for type, subscriptions in self.__subscriptions.items()
            for subscription in subscriptions
            if isinstance(event, type)
        }
        for subscriber in subscribers:
            subscriber.put(event)

    def shutdown(self):
        for subscriber in set(chain.from_iterable(self.__subscriptions.values())):
            subscriber.shutdown()
        self.__subscriptions.clear()
