"""Random Generator MCP Server backed by the operating system's CSPRNG"""

import argparse
import logging
import sys
from typing import Any

from fastmcp import FastMCP

from mcp_random.config import LOG_LEVELS, TRANSPORTS, Settings
from mcp_random.engine.core import RandomnessEngine
from mcp_random.operations import Number, PasswordOptions, WholeNumber, dispatch

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-random"


def create_server(engine: RandomnessEngine | None = None) -> FastMCP:
    """Build the FastMCP server; every tool routes through the operation registry"""
    engine = engine or RandomnessEngine()
    mcp = FastMCP(SERVER_NAME)

    @mcp.tool
    def random_integer(min: WholeNumber, max: WholeNumber) -> str:
        """Generate a random integer between min and max (inclusive)

        Args:
            min: Minimum value (inclusive)
            max: Maximum value (inclusive)
        """
        return dispatch("random_integer", {"min": min, "max": max}, engine)

    @mcp.tool
    def random_float(min: Number, max: Number, precision: WholeNumber = 10) -> str:
        """Generate a random floating-point number between min and max

        Args:
            min: Minimum value
            max: Maximum value
            precision: Decimal places (default: 10)
        """
        return dispatch("random_float", {"min": min, "max": max, "precision": precision}, engine)

    @mcp.tool
    def random_choice(options: list[Any]) -> str:
        """Randomly select one item from an array of options"""
        return dispatch("random_choice", {"options": options}, engine)

    @mcp.tool
    def random_sample(array: list[Any], count: WholeNumber) -> str:
        """Randomly select multiple unique items from an array (without replacement)

        Args:
            array: Array to sample from
            count: Number of items to select
        """
        return dispatch("random_sample", {"array": array, "count": count}, engine)

    @mcp.tool
    def random_shuffle(array: list[Any]) -> str:
        """Return a shuffled copy of the input array"""
        return dispatch("random_shuffle", {"array": array}, engine)

    @mcp.tool
    def random_uuid() -> str:
        """Generate a random UUID v4"""
        return dispatch("random_uuid", {}, engine)

    @mcp.tool
    def random_bytes(count: WholeNumber, encoding: str = "hex") -> str:
        """Generate random bytes

        Args:
            count: Number of bytes to generate
            encoding: Output encoding (hex, base64, base64url)
        """
        return dispatch("random_bytes", {"count": count, "encoding": encoding}, engine)

    @mcp.tool
    def flip_coin(count: WholeNumber = 1) -> str:
        """Flip a coin (or multiple coins)

        Args:
            count: Number of coins to flip (default: 1)
        """
        return dispatch("flip_coin", {"count": count}, engine)

    @mcp.tool
    def roll_dice(sides: WholeNumber, count: WholeNumber = 1) -> str:
        """Roll dice with specified number of sides

        Args:
            sides: Number of sides on each die
            count: Number of dice to roll (default: 1)

        Returns:
            A single roll, or the rolls and their sum
        """
        return dispatch("roll_dice", {"sides": sides, "count": count}, engine)

    @mcp.tool
    def random_normal(mean: Number = 0.0, stddev: Number = 1.0) -> str:
        """Generate a random number from a normal distribution (Box-Muller)

        Args:
            mean: Mean of the distribution (default: 0)
            stddev: Standard deviation (default: 1)
        """
        return dispatch("random_normal", {"mean": mean, "stddev": stddev}, engine)

    @mcp.tool
    def random_weighted_choice(options: list[Any], weights: list[Number]) -> str:
        """Select an option based on weighted probabilities

        Args:
            options: Array of options
            weights: Array of weights (same length as options)
        """
        return dispatch("random_weighted_choice", {"options": options, "weights": weights}, engine)

    @mcp.tool
    def random_password(length: WholeNumber = 16, options: PasswordOptions | None = None) -> str:
        """Generate a secure random password

        Args:
            length: Password length (default: 16)
            options: Character classes to include and whether to exclude similar characters
        """
        arguments: dict[str, Any] = {"length": length}
        if options is not None:
            arguments["options"] = options.model_dump(by_alias=True)
        return dispatch("random_password", arguments, engine)

    @mcp.tool
    def help() -> str:
        """Get comprehensive documentation for all random functions"""
        return dispatch("help", {}, engine)

    return mcp


mcp = create_server()


def main(argv=None) -> None:
    """Run the random MCP server"""
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="Cryptographically secure randomness MCP server.")
    parser.add_argument("--transport", choices=TRANSPORTS, default=settings.transport,
                        help="Transport protocol to use (defaults to stdio).")
    parser.add_argument("--host", default=settings.host, help="Bind address for network transports.")
    parser.add_argument("--port", type=int, default=settings.port, help="Port for network transports.")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=settings.log_level)
    args = parser.parse_args(argv)

    # stdout carries the stdio transport
    logging.basicConfig(
        stream=sys.stderr,
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    server = create_server(RandomnessEngine(float_strategy=settings.float_strategy))
    if args.transport == "stdio":
        logger.info("%s MCP server running on stdio", SERVER_NAME)
        server.run(transport="stdio")
    else:
        logger.info("%s MCP server running on %s at %s:%d", SERVER_NAME, args.transport, args.host, args.port)
        server.run(transport=args.transport, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
