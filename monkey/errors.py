from typing import Any, List

from monkey.types import ErrorVal


class ParseError(Exception):
    """Raised when source text contains syntax errors.

    `errors` holds every message collected by the parser, in order.
    """
    def __init__(self, errors: List[str]):
        super().__init__('\n'.join(errors))
        self.errors = errors


class EvaluationError(Exception):
    """Exception type used to propagate Monkey runtime errors."""
    def __init__(self, err: ErrorVal):
        super().__init__(f"{err.name}: {err.message}")
        self.err = err

    @property
    def message(self) -> str:
        return self.err.message


class ReturnSignal(Exception):
    """Internal exception to unwind a return statement to its call boundary."""
    def __init__(self, value: Any):
        super().__init__('return')
        self.value = value


def type_error(message: str) -> EvaluationError:
    return EvaluationError(ErrorVal('TypeError', message))
