"""
errors.py

Exceptions raised while normalizing operation strings and evaluating
rotation expressions. All of them are ValueErrors, so callers that already
guard user input with ``except ValueError`` keep working.
"""


class QopError(ValueError):
    """Base class for every error raised by the engine."""


class InvalidCharacter(QopError):
    def __init__(self, char):
        self.char = char
        super().__init__(f"Invalid character '{char}'")


class ExpressionError(QopError):
    """Malformed numeric expression."""


class NumberExpected(ExpressionError):
    def __init__(self, message="Number expected"):
        super().__init__(message)


class InvalidNumber(ExpressionError):
    def __init__(self, message="Invalid number"):
        super().__init__(message)


class IntegerExpected(ExpressionError):
    def __init__(self, message="Integer expected"):
        super().__init__(message)
