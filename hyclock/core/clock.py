from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Final

from hyclock.core.exception import ClockError, ClockOverflowError, InvalidClockIdError


DELIMITER: Final[str] = ":"

PHYSICAL_WIDTH: Final[int] = 15
COUNTER_WIDTH: Final[int] = 8

MAX_PHYSICAL: Final[int] = 10 ** PHYSICAL_WIDTH - 1
MAX_COUNTER: Final[int] = 10 ** COUNTER_WIDTH - 1

_DIGITS = re.compile(r"[0-9]+")


class Ordering(IntEnum):
    LT = -1
    EQ = 0
    GT = 1


@dataclass(frozen=True, order=True, slots=True)
class Clock:
    """
    Hybrid Logical Clock (HLC) value.

    A timestamp composed of:
        - physical: highest wall-clock time observed, in milliseconds
        - counter: logical counter for events sharing the same physical time
        - id: identifier of the node that produced this value, used to break ties

    The natural ordering (order=True) is the total order used by compare():
        (physical, counter, id)

    Clocks are values: every operation of this module returns a new Clock.
    Build them with create(), local() and remote() rather than directly.
    """
    physical: int
    counter: int
    id: str

    def __str__(self) -> str:
        try:
            return to_string(self)
        except ClockError:
            # not encodable, show the raw fields
            return f"{self.physical}{DELIMITER}{self.counter}{DELIMITER}{self.id}"

    def to_dict(self) -> dict[str, Any]:
        """Return a msgpack/JSON-serializable representation of the clock."""
        return values(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Clock:
        """
        Reconstruct a Clock from a serialized dictionary.

        Fields must already have their exact types (no float or bool
        coercion) and the result must be encodable, see validate().
        """
        physical, counter, id = data["physical"], data["counter"], data["id"]
        if type(physical) is not int or type(counter) is not int or not isinstance(id, str):
            raise TypeError(f"Invalid clock field types: {data!r}")
        return validate(cls(physical=physical, counter=counter, id=id))


def is_valid_id(id: str) -> bool:
    return DELIMITER not in id


def _check_id(id: str) -> None:
    if not is_valid_id(id):
        raise InvalidClockIdError(f"Clock id must not contain {DELIMITER!r}: {id!r}")


def create(id: str, now: int) -> Clock:
    """
    Create the initial clock of a lineage.

    The physical time is set to `now` and the counter starts at zero.
    """
    _check_id(id)
    return Clock(physical=now, counter=0, id=id)


def local(id: str, now: int, current: Clock) -> Clock:
    """
    Advance a clock for a local event (e.g., a write).

    Rules:
    - physical = max(now, current.physical)
    - if now > current.physical: counter = 0
    - else: counter = current.counter + 1

    The result carries the `id` argument, not `current.id`.
    This ensures monotonicity even if the wall clock moves backward.
    """
    _check_id(id)

    if now > current.physical:
        return Clock(physical=now, counter=0, id=id)

    return Clock(physical=current.physical, counter=current.counter + 1, id=id)


def remote(id: str, local_clock: Clock, remote_clock: Clock, now: int) -> Clock:
    """
    Merge the local clock with a clock received from another node.

    Standard HLC merge rules:
    - pt = max(local.physical, remote.physical, now)
    - counter depends on which physical time dominates:
        * if local and remote both hold pt: max(counters) + 1
        * if local holds pt: local.counter + 1
        * if remote holds pt: remote.counter + 1
        * if now dominates: counter = 0

    `local_clock` must be the caller's own current clock and `remote_clock`
    the one just received. Swapping them silently yields a wrong counter.
    """
    _check_id(id)

    pt = max(local_clock.physical, remote_clock.physical, now)

    if pt == local_clock.physical and pt == remote_clock.physical:
        counter = max(local_clock.counter, remote_clock.counter) + 1
    elif pt == local_clock.physical:
        counter = local_clock.counter + 1
    elif pt == remote_clock.physical:
        counter = remote_clock.counter + 1
    else:
        counter = 0

    return Clock(physical=pt, counter=counter, id=id)


def compare(first: Clock, second: Clock) -> Ordering:
    """
    Total order over clocks: physical, then counter, then id.

    Smaller id sorts first, so compare() always agrees with the
    dataclass ordering and with sorted().
    """
    left = (first.physical, first.counter, first.id)
    right = (second.physical, second.counter, second.id)
    if left < right:
        return Ordering.LT
    if left > right:
        return Ordering.GT
    return Ordering.EQ


def validate(clock: Clock) -> Clock:
    """Check that a clock can be encoded without losing its ordering."""
    _check_id(clock.id)

    if not 0 <= clock.physical <= MAX_PHYSICAL:
        raise ClockOverflowError(
            f"physical {clock.physical} does not fit in {PHYSICAL_WIDTH} digits"
        )
    if not 0 <= clock.counter <= MAX_COUNTER:
        raise ClockOverflowError(
            f"counter {clock.counter} does not fit in {COUNTER_WIDTH} digits"
        )
    return clock


def to_string(clock: Clock) -> str:
    """
    Encode a clock into its canonical form:

        PPPPPPPPPPPPPPP:CCCCCCCC:ID

    Fields are zero-padded so that string order matches the
    order of (physical, counter).
    """
    validate(clock)
    return f"{clock.physical:015d}{DELIMITER}{clock.counter:08d}{DELIMITER}{clock.id}"


def from_string(text: str) -> Clock | None:
    """Decode a canonical clock string. Returns None if it is malformed."""
    parts = text.split(DELIMITER)
    if len(parts) != 3:
        return None

    physical, counter, id = parts
    if not _DIGITS.fullmatch(physical) or not _DIGITS.fullmatch(counter):
        return None

    return Clock(physical=int(physical), counter=int(counter), id=id)


def values(clock: Clock) -> dict[str, Any]:
    return {
        "physical": clock.physical,
        "counter": clock.counter,
        "id": clock.id,
    }
