"""Error taxonomy for the randomness engine and the operation router"""


class RandomnessError(ValueError):
    """Recoverable input error; rendered to the caller as ``Error: <message>``"""


class InvalidBoundError(RandomnessError):
    """min > max, negative precision or negative standard deviation"""


class InvalidCountError(RandomnessError):
    """Negative or out-of-range count, length or size"""


class InvalidShapeError(RandomnessError):
    """Mismatched, empty or wrongly typed collections"""


class InvalidWeightError(RandomnessError):
    """Negative weight, or weights summing to zero"""


class EmptyAlphabetError(RandomnessError):
    """Every character class was disabled"""


class UnknownOperationError(RandomnessError):
    """Requested operation name is not registered"""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class EntropyUnavailableError(RuntimeError):
    """The platform cannot supply secure randomness.

    Never caught by the router: the operation fails and the host should
    restart rather than continue with weaker randomness.
    """
