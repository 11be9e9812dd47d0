from typing import Any, Dict, Optional

from monkey.errors import EvaluationError
from monkey.types import ErrorVal


class Environment:
    """Represents a scope mapping identifiers to values.

    Scopes are chained through `parent`. A child never owns its parent:
    closures and call scopes hold plain references to the environment
    they were created in, so a scope stays alive for as long as any
    function value refers to it.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def get(self, name: str) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env.values[name]
            env = env.parent
        raise EvaluationError(ErrorVal('NameError', f'identifier not found: {name}'))

    def set(self, name: str, value: Any) -> Any:
        # `let` always binds in the current scope, shadowing outer bindings
        self.values[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return True
            env = env.parent
        return False
