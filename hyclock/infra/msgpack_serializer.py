import struct

import msgpack

from hyclock.core.clock import Clock
from hyclock.core.exception import ClockError, MalformedClockError
from hyclock.core.types_ import Serializable

_HEADER = struct.Struct("!I")


class Serializer:
    @staticmethod
    def serialize(s: Serializable) -> bytes:
        payload = msgpack.packb(s.to_dict(), use_bin_type=True)
        frame = _HEADER.pack(len(payload)) + payload
        return frame

    @staticmethod
    def deserialize(s: bytes) -> dict:
        return msgpack.unpackb(s, raw=False)

    @classmethod
    def unframe(cls, frame: bytes) -> dict:
        if len(frame) < _HEADER.size:
            raise MalformedClockError("Frame too short")

        (length,) = _HEADER.unpack_from(frame)
        payload = frame[_HEADER.size:]
        if len(payload) != length:
            raise MalformedClockError(
                f"Frame length mismatch: header says {length}, got {len(payload)}"
            )
        try:
            return cls.deserialize(payload)
        except (msgpack.UnpackException, ValueError) as e:
            raise MalformedClockError(f"Invalid msgpack payload: {e}") from e

    @classmethod
    def clock(cls, frame: bytes) -> Clock:
        data = cls.unframe(frame)
        if not isinstance(data, dict):
            raise MalformedClockError(f"Invalid clock payload: {data!r}")

        try:
            return Clock.from_dict(data)
        except (KeyError, TypeError, ClockError) as e:
            raise MalformedClockError(f"Invalid clock payload: {e}") from e
