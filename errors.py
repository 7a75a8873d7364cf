class SweepError(Exception):
    """Base class for anything that stops a time-lock sweep."""


class RecordSkipped(SweepError):
    """
    A single channel record can't be swept. The batch carries on without it.
    """

    reason = "skipped"


class OutputNotFound(RecordSkipped):
    reason = "output not found"


class ScriptNotFound(RecordSkipped):
    reason = "csv delay not found"


class InvalidScriptLength(RecordSkipped):
    reason = "invalid target script"


class DelayBaseKeyMismatch(RecordSkipped):
    reason = "delay base key mismatch"


class KeyParseError(SweepError):
    pass


class KeyDerivationError(SweepError):
    pass


class MissingSweepAddress(SweepError):
    pass


class InvalidSweepAddress(SweepError):
    pass


class NoRecordsError(SweepError):
    pass


class NoSweepableOutputs(SweepError):
    pass


class InsufficientFunds(SweepError):
    pass


class SigningError(SweepError):
    pass


class PublishError(SweepError):
    # The signed transaction that failed to go out, so it can be sent by hand.
    raw_tx_hex: str = ""
