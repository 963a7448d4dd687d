class ICalError(Exception):
    def __init__(self, msg, position=None):
        super().__init__(msg)
        self.msg = msg
        self.position = position

    def __str__(self):
        if self.position is None:
            return str(self.msg)
        return f"At pos {self.position!s}: {self.msg!s}"


class LexError(ICalError):
    """The tokenizer hit an illegal character or a premature end of stream."""


class StructureError(ICalError):
    """The token sequence does not follow the calendar grammar."""


class InvalidValueError(ICalError):
    """A property value could not be resolved to its typed form."""

    def __init__(self, msg, position=None, *, prop=None):
        super().__init__(msg, position)
        self.prop = prop


class DurationError(InvalidValueError):
    pass


class CancelledError(ICalError):
    def __init__(self, msg="cancelled", position=None):
        super().__init__(msg, position)


class ParseError(ICalError):
    """
    Raised by the parser for every failure.

    @ivar cause:
        The underlying LexError, StructureError, InvalidValueError or
        CancelledError.
    @ivar calendar:
        A partial Calendar holding what was assembled before the failure,
        for diagnostics only.
    """

    def __init__(self, cause, calendar=None):
        super().__init__(f"parse: {cause}")
        self.cause = cause
        self.calendar = calendar

    @property
    def cancelled(self):
        return isinstance(self.cause, CancelledError)


class SerializeError(ICalError):
    pass
