"""Operation registry shared by the MCP server and the HTTP catalog

Each operation pairs a pydantic parameter model with a handler on
``RandomnessEngine``. ``dispatch`` validates an argument bag, runs the
handler and renders the result (or any input error) as text.
"""

import json
import logging
from dataclasses import dataclass
from typing import Annotated, Any, Callable

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, FiniteFloat, ValidationError

from mcp_random.engine.core import BYTE_ENCODINGS, RandomnessEngine
from mcp_random.engine.errors import RandomnessError, UnknownOperationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Operation:
    name: str
    description: str
    params: type[BaseModel]
    handler: Callable[[RandomnessEngine, Any], Any]
    as_json: bool = False


OPERATIONS: dict[str, Operation] = {}


def operation(name: str, description: str, params: type[BaseModel], as_json: bool = False):
    """Register the decorated handler under *name*"""

    def register(handler):
        OPERATIONS[name] = Operation(name, description, params, handler, as_json)
        return handler

    return register


def get_operation(name: str) -> Operation:
    try:
        return OPERATIONS[name]
    except KeyError:
        raise UnknownOperationError(name) from None


# -- parameter models ----------------------------------------------------

def _whole_number(value: Any) -> Any:
    # JSON numbers only: no booleans, no numeric strings; 5.0 is still an integer
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("must be an integer")
        return int(value)
    return value


def _number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("must be a number")
    return value


WholeNumber = Annotated[int, BeforeValidator(_whole_number)]
Number = Annotated[FiniteFloat, BeforeValidator(_number)]


class NoParams(BaseModel):
    pass


class IntegerParams(BaseModel):
    min: WholeNumber = Field(description="Minimum value (inclusive)")
    max: WholeNumber = Field(description="Maximum value (inclusive)")


class FloatParams(BaseModel):
    min: Number = Field(description="Minimum value")
    max: Number = Field(description="Maximum value")
    precision: WholeNumber = Field(10, description="Decimal places")


class ChoiceParams(BaseModel):
    options: list[Any] = Field(description="Array of options to choose from")


class SampleParams(BaseModel):
    array: list[Any] = Field(description="Array to sample from")
    count: WholeNumber = Field(description="Number of items to select")


class ShuffleParams(BaseModel):
    array: list[Any] = Field(description="Array to shuffle")


class BytesParams(BaseModel):
    count: WholeNumber = Field(description="Number of bytes to generate")
    encoding: str = Field("hex", description=f"Output encoding ({', '.join(BYTE_ENCODINGS)})")


class CoinParams(BaseModel):
    count: WholeNumber = Field(1, description="Number of coins to flip")


class DiceParams(BaseModel):
    sides: WholeNumber = Field(description="Number of sides on the die")
    count: WholeNumber = Field(1, description="Number of dice to roll")


class NormalParams(BaseModel):
    mean: Number = Field(0.0, description="Mean of the distribution")
    stddev: Number = Field(1.0, description="Standard deviation")


class WeightedChoiceParams(BaseModel):
    options: list[Any] = Field(description="Array of options")
    weights: list[Number] = Field(description="Array of weights (same length as options)")


class PasswordOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uppercase: bool = Field(True, description="Include uppercase letters")
    lowercase: bool = Field(True, description="Include lowercase letters")
    numbers: bool = Field(True, description="Include numbers")
    symbols: bool = Field(True, description="Include symbols")
    exclude_similar: bool = Field(
        False, alias="excludeSimilar", description="Exclude similar characters (0/O, 1/l)"
    )

    def classes(self) -> set[str]:
        flags = {
            "uppercase": self.uppercase,
            "lowercase": self.lowercase,
            "numbers": self.numbers,
            "symbols": self.symbols,
        }
        return {name for name, enabled in flags.items() if enabled}


class PasswordParams(BaseModel):
    length: WholeNumber = Field(16, description="Password length")
    options: PasswordOptions = Field(
        default_factory=PasswordOptions, description="Password generation options"
    )


# -- handlers ------------------------------------------------------------

@operation("random_integer", "Generate a random integer between min and max (inclusive)", IntegerParams)
def _random_integer(engine: RandomnessEngine, p: IntegerParams):
    return engine.uniform_int(p.min, p.max)


@operation("random_float", "Generate a random floating-point number between min and max", FloatParams)
def _random_float(engine: RandomnessEngine, p: FloatParams):
    return engine.uniform_float(p.min, p.max, p.precision)


@operation("random_choice", "Randomly select one item from an array of options", ChoiceParams, as_json=True)
def _random_choice(engine: RandomnessEngine, p: ChoiceParams):
    return engine.choice(p.options)


@operation(
    "random_sample",
    "Randomly select multiple unique items from an array (without replacement)",
    SampleParams,
    as_json=True,
)
def _random_sample(engine: RandomnessEngine, p: SampleParams):
    return engine.sample(p.array, p.count)


@operation("random_shuffle", "Return a shuffled copy of the input array", ShuffleParams, as_json=True)
def _random_shuffle(engine: RandomnessEngine, p: ShuffleParams):
    return engine.shuffle(p.array)


@operation("random_uuid", "Generate a random UUID v4", NoParams)
def _random_uuid(engine: RandomnessEngine, p: NoParams):
    return engine.random_uuid()


@operation("random_bytes", "Generate random bytes", BytesParams)
def _random_bytes(engine: RandomnessEngine, p: BytesParams):
    return engine.random_bytes(p.count, p.encoding)


@operation("flip_coin", "Flip a coin (or multiple coins)", CoinParams)
def _flip_coin(engine: RandomnessEngine, p: CoinParams):
    flips = engine.flip_coin(p.count)
    return flips[0] if p.count == 1 else flips


@operation("roll_dice", "Roll dice with specified number of sides", DiceParams)
def _roll_dice(engine: RandomnessEngine, p: DiceParams):
    rolls = engine.roll_dice(p.sides, p.count)
    if p.count == 1:
        return rolls[0]
    return {"rolls": rolls, "sum": sum(rolls)}


@operation("random_normal", "Generate a random number from a normal distribution", NormalParams)
def _random_normal(engine: RandomnessEngine, p: NormalParams):
    return engine.normal(p.mean, p.stddev)


@operation(
    "random_weighted_choice",
    "Select an option based on weighted probabilities",
    WeightedChoiceParams,
    as_json=True,
)
def _random_weighted_choice(engine: RandomnessEngine, p: WeightedChoiceParams):
    return engine.weighted_choice(p.options, p.weights)


@operation("random_password", "Generate a secure random password", PasswordParams)
def _random_password(engine: RandomnessEngine, p: PasswordParams):
    return engine.generate_password(p.length, p.options.classes(), p.options.exclude_similar)


@operation("help", "Get comprehensive documentation for all random functions", NoParams)
def _help(engine: RandomnessEngine, p: NoParams):
    return render_help()


# -- rendering -----------------------------------------------------------

def _format_float(value: float) -> str:
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def render(value: Any, as_json: bool = False) -> str:
    """Convert a handler result to its text payload"""
    if as_json:
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    return json.dumps(value, ensure_ascii=False)


def _describe_validation_error(name: str, error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        where = ".".join(str(part) for part in item["loc"]) or "arguments"
        problems.append(f"{where}: {item['msg']}")
    return f"invalid arguments for {name}: {'; '.join(problems)}"


def dispatch(name: str, arguments: dict[str, Any] | None = None, engine: RandomnessEngine | None = None) -> str:
    """Run operation *name* and return its text payload

    Input errors (unknown name, argument shape, engine validation) come back
    as ``Error: <message>``. EntropyUnavailableError propagates.
    """
    engine = engine or RandomnessEngine()
    try:
        op = get_operation(name)
        params = op.params.model_validate(arguments or {})
        result = op.handler(engine, params)
    except ValidationError as e:
        message = _describe_validation_error(name, e)
    except RandomnessError as e:
        message = str(e)
    else:
        logger.debug("Operation %s completed", name)
        return render(result, op.as_json)

    logger.debug("Operation %s rejected: %s", name, message)
    return f"Error: {message}"


# -- documentation -------------------------------------------------------

def _param_type(prop: dict[str, Any]) -> str:
    if "type" in prop:
        return prop["type"]
    if "$ref" in prop or "allOf" in prop:
        return "object"
    return "any"


def render_help() -> str:
    """Markdown documentation built from the registry"""
    lines = [
        "# MCP Random Server Documentation",
        "",
        "All randomness is drawn from the operating system's cryptographically secure",
        "random number generator. No state is kept between calls.",
        "",
        "## Available Functions:",
    ]
    for op in OPERATIONS.values():
        schema = op.params.model_json_schema()
        properties = schema.get("properties", {})
        required = set(schema.get("required", []))

        lines += ["", f"### {op.name}({', '.join(properties)})", op.description]
        if not properties:
            lines.append("- No parameters")
        for pname, prop in properties.items():
            detail = _param_type(prop)
            if pname in required:
                detail += ", required"
            elif "default" in prop:
                detail += f", default: {json.dumps(prop['default'])}"
            description = prop.get("description", "")
            lines.append(f"- {pname} ({detail}): {description}".rstrip(": "))
    return "\n".join(lines) + "\n"
