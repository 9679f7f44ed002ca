from typing import Callable, Protocol

NowMillis = Callable[[], int]


class Serializable(Protocol):
    def to_dict(self) -> dict:
        ...
