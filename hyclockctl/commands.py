from hyclock.bootstrap.config.settings import ClockSettings
from hyclock.core import clock as hlc
from hyclock.core.cell import now_millis
from hyclock.infra.msgpack_serializer import Serializer
from hyclockctl.parser import ParseError, parse_clock, parse_id, parse_now


COMMANDS = {}

def command(name):
    def decorator(fn):
        COMMANDS[name] = fn
        return fn
    return decorator


def _now(args: list[str], index: int) -> int:
    if len(args) > index:
        return parse_now(args[index])
    return now_millis()


@command("create")
def cmd_create(settings: ClockSettings, args: list[str]) -> str:
    if len(args) not in (1, 2):
        raise ParseError("Usage: create <id> [now]")

    node_id = parse_id(args[0], settings.node_id)
    return hlc.to_string(hlc.create(node_id, _now(args, 1)))


@command("local")
def cmd_local(settings: ClockSettings, args: list[str]) -> str:
    if len(args) not in (2, 3):
        raise ParseError("Usage: local <id> <clock> [now]")

    node_id = parse_id(args[0], settings.node_id)
    current = parse_clock(args[1])
    return hlc.to_string(hlc.local(node_id, _now(args, 2), current))


@command("remote")
def cmd_remote(settings: ClockSettings, args: list[str]) -> str:
    """
    Handle the 'remote' command.

    Expected syntax:
        remote <id> <local clock> <remote clock> [now]

    The first clock is this node's current clock, the second
    the one just received. Their order matters.
    """
    if len(args) not in (3, 4):
        raise ParseError("Usage: remote <id> <local> <remote> [now]")

    node_id = parse_id(args[0], settings.node_id)
    local_clock = parse_clock(args[1])
    remote_clock = parse_clock(args[2])
    return hlc.to_string(hlc.remote(node_id, local_clock, remote_clock, _now(args, 3)))


@command("compare")
def cmd_compare(settings: ClockSettings, args: list[str]) -> str:
    if len(args) != 2:
        raise ParseError("Usage: compare <a> <b>")

    return hlc.compare(parse_clock(args[0]), parse_clock(args[1])).name


@command("decode")
def cmd_decode(settings: ClockSettings, args: list[str]) -> str:
    if len(args) != 1:
        raise ParseError("Usage: decode <clock>")

    v = hlc.values(parse_clock(args[0]))
    return f"physical={v['physical']} counter={v['counter']} id={v['id']}"


@command("sort")
def cmd_sort(settings: ClockSettings, args: list[str]) -> str:
    clocks = sorted(parse_clock(raw) for raw in args)
    return "\n".join(hlc.to_string(c) for c in clocks)


@command("frame")
def cmd_frame(settings: ClockSettings, args: list[str]) -> str:
    if len(args) != 1:
        raise ParseError("Usage: frame <clock>")

    return Serializer.serialize(parse_clock(args[0])).hex()
