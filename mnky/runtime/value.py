"""Runtime values produced by the evaluator.

Values are plain dataclasses and compare by value: two Integer(5) are equal no matter where they came from. NULL,
TRUE and FALSE are shared instances only to avoid needless allocation.

ReturnValue and Error are control values: ReturnValue only exists while a `return` travels up to the enclosing
function call, and an Error stops every evaluation it reaches until it is handed back to the caller.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


INT64_MOD = 2 ** 64
INT64_MIN = -2 ** 63


def wrap_int64(num):
    """Wraps num around to a signed 64-bit integer (two's complement overflow)."""
    return (num - INT64_MIN) % INT64_MOD + INT64_MIN


class Value(ABC):
    """Superclass of every runtime value."""
    type = "VALUE"

    @abstractmethod
    def inspect(self):
        """Printable representation of this value, as shown by the shell."""

    @property
    def truthy(self):
        """How this value behaves as a condition. Anything that isn't false, zero or null is truthy."""
        return True

    def __str__(self):
        return self.inspect()


@dataclass(frozen=True)
class Integer(Value):
    value: int
    type = "INTEGER"

    def __post_init__(self):
        object.__setattr__(self, "value", wrap_int64(self.value))

    def inspect(self):
        return str(self.value)

    @property
    def truthy(self):
        return self.value != 0


@dataclass(frozen=True)
class Boolean(Value):
    value: bool
    type = "BOOLEAN"

    def inspect(self):
        return "true" if self.value else "false"

    @property
    def truthy(self):
        return self.value


@dataclass(frozen=True)
class String(Value):
    value: str
    type = "STRING"

    def inspect(self):
        return self.value


@dataclass(frozen=True)
class Array(Value):
    elements: tuple = ()
    type = "ARRAY"

    def __post_init__(self):
        object.__setattr__(self, "elements", tuple(self.elements))

    def inspect(self):
        return "[" + ", ".join(elem.inspect() for elem in self.elements) + "]"


@dataclass(frozen=True)
class Null(Value):
    type = "NULL"

    def inspect(self):
        return "null"

    @property
    def truthy(self):
        return False


@dataclass(frozen=True, eq=False)
class Function(Value):
    """User-defined function. env is the environment the function literal was evaluated in (its closure), held by
    reference so that later bindings in that environment stay visible to the function.
    """
    parameters: list
    body: object
    env: object = field(repr=False)
    type = "FUNCTION"

    def inspect(self):
        params = ", ".join(str(param) for param in self.parameters)
        return f"fn({params}) {{\n{self.body}\n}}"


@dataclass(frozen=True)
class ReturnValue(Value):
    value: Value
    type = "RETURN_VALUE"

    def inspect(self):
        return self.value.inspect()

    @property
    def truthy(self):
        return self.value.truthy


@dataclass(frozen=True)
class Error(Value):
    message: str
    type = "ERROR"

    def inspect(self):
        return self.message

    @property
    def truthy(self):
        return False


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool(value):
    """Returns the shared Boolean for a Python bool."""
    return TRUE if value else FALSE


def is_error(value):
    return isinstance(value, Error)


def is_control(value):
    """Whether value must stop the evaluation it reaches: an Error, or a ReturnValue on its way to a call boundary."""
    return isinstance(value, (Error, ReturnValue))
