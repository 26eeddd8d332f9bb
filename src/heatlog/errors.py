"""Exception hierarchy for heatlog"""


class HeatlogError(Exception):
    """Base class for all errors raised by heatlog."""


class ConfigurationError(HeatlogError):
    """Invalid run configuration (e.g. a pattern that does not compile)."""


class EmptyDigestError(HeatlogError):
    """A quantile was requested from a digest with no observations."""


class DigestFrozenError(HeatlogError):
    """A frozen digest was asked to absorb or merge more values."""


class InputDecodeError(HeatlogError):
    """An input line is not valid UTF-8."""

    def __init__(self, source: str, line_number: int, reason: str):
        self.source = source
        self.line_number = line_number
        self.reason = reason
        super().__init__(f'{source}:{line_number}: line is not valid UTF-8 ({reason})')
