class GameFormatError(ValueError):
    """A persisted document is missing required fields or is malformed."""


class TurnBlockedError(RuntimeError):
    pass


class NoPendingInteractionError(RuntimeError):
    pass


class InteractionMismatchError(RuntimeError):
    pass


class InvalidWinnerError(ValueError):
    pass


class InvalidStatError(ValueError):
    pass


class SaveFailedError(RuntimeError):
    pass
