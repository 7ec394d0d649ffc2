"""Simulated broadcast medium between the car and the key fob."""

import logging
from collections import deque
from typing import Iterable, Optional

from .roles import MessageHandler


logger = logging.getLogger(__name__)


class BroadcastTransport:
    """
    An ordered queue of frames delivered to every registered handler.

    Every handler sees every frame, the sender included. Responses go to the
    back of the queue, so frames are delivered in emission order.
    """

    def __init__(self, handlers: Optional[Iterable[MessageHandler]] = None) -> None:
        """Creates a new transport with the given handlers registered."""
        self._queue: deque[bytes] = deque()
        self._handlers: list[MessageHandler] = []
        self._delivered: list[bytes] = []
        for handler in handlers or ():
            self.register(handler)

    def register(self, handler: MessageHandler) -> None:
        """Subscribes a handler to every future frame."""
        if not isinstance(handler, MessageHandler):
            raise TypeError(f"{type(handler).__name__} does not implement handle()")
        self._handlers.append(handler)

    def broadcast(self, message: bytes) -> None:
        """Enqueues a frame for delivery."""
        self._queue.append(bytes(message))

    def step(self) -> bool:
        """Delivers the oldest pending frame to all handlers. Returns False if idle."""
        if not self._queue:
            return False

        message = self._queue.popleft()
        self._delivered.append(message)
        logger.debug("delivering %d-byte frame to %d handlers", len(message), len(self._handlers))

        for handler in self._handlers:
            response = handler.handle(message)
            if response is not None:
                self._queue.append(response)
        return True

    def drain(self) -> int:
        """Delivers frames until the queue is empty. Returns the number delivered."""
        count = 0
        while self.step():
            count += 1
        return count

    @property
    def pending(self) -> int:
        """Returns the number of frames waiting for delivery."""
        return len(self._queue)

    @property
    def is_empty(self) -> bool:
        """Returns true if nothing is waiting for delivery."""
        return len(self._queue) == 0

    @property
    def delivered(self) -> list[bytes]:
        """Returns every frame delivered so far, in order."""
        return list(self._delivered)

    @property
    def handlers(self) -> list[MessageHandler]:
        """Returns the registered handlers in delivery order."""
        return list(self._handlers)
