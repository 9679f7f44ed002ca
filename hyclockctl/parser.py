from hyclock.core import clock as hlc
from hyclock.core.clock import Clock


class ParseError(Exception):
    pass


def parse_clock(raw: str) -> Clock:
    clock = hlc.from_string(raw)
    if clock is None:
        raise ParseError(f"Invalid clock: {raw!r} (expected PPPPPPPPPPPPPPP:CCCCCCCC:ID)")
    return clock


def parse_now(raw: str) -> int:
    """Parse a wall-clock reading given in milliseconds since the epoch."""
    if not raw.isascii() or not raw.isdigit():
        raise ParseError(f"Invalid timestamp: {raw!r} (expected milliseconds)")
    return int(raw)


def parse_id(raw: str, default: str) -> str:
    # "-" stands for the configured node id
    node_id = default if raw == "-" else raw
    if not hlc.is_valid_id(node_id):
        raise ParseError(f"Invalid id: {node_id!r} (must not contain {hlc.DELIMITER!r})")
    return node_id
