"""
Minimal publish/subscribe signal.

Stores expose signals (settings changed, notification added, persistence
failed) so collaborators such as the scheduler can react without the store
knowing about them.
"""
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Receiver = Callable[[Any], None]


class Signal:
    def __init__(self, name: str):
        self.name = name
        self._receivers: list[Receiver] = []

    def connect(self, receiver: Receiver) -> Receiver:
        """Subscribe a receiver. Returns it so this can be used as a decorator."""
        if receiver not in self._receivers:
            self._receivers.append(receiver)
        return receiver

    def disconnect(self, receiver: Receiver) -> None:
        if receiver in self._receivers:
            self._receivers.remove(receiver)

    def send(self, payload: Any) -> int:
        """
        Deliver payload to every receiver in subscription order.

        A failing receiver is logged and does not stop delivery to the rest,
        nor does it undo the change that triggered the signal.
        Returns the number of receivers that handled the payload.
        """
        delivered = 0
        for receiver in list(self._receivers):
            try:
                receiver(payload)
                delivered += 1
            except Exception as e:
                logger.error(f"Receiver {receiver!r} failed on signal '{self.name}': {e}")
        return delivered

    @property
    def receivers(self) -> list[Receiver]:
        return list(self._receivers)
