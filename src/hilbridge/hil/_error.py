"""Error classes raised while parsing and evaluating."""

__all__ = ["ParseError", "EvalError"]


class ParseError(Exception):
    """Exception raised for syntax errors in a template.

    Args:
        message: (str) Error description
        pos: (Pos) Position the error was detected at

    Attributes:
        message: (str) Error description
        pos: (Pos) Position the error was detected at
    """

    def __init__(self, message, pos):
        self.message = message
        self.pos = pos
        super().__init__(f"{pos}: {message}")


class EvalError(Exception):
    """Error while evaluating a parsed template.

    Evaluation does not track source positions, so these carry only a
    message.
    """
