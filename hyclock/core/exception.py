class ClockError(Exception):
    pass


class InvalidClockIdError(ClockError):
    pass


class ClockOverflowError(ClockError):
    pass


class MalformedClockError(ClockError):
    pass


class ClockDriftError(ClockError):
    pass
