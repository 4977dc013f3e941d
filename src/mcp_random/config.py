"""Environment-driven settings for the mcp-random servers"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from mcp_random.engine.core import FloatStrategy

TRANSPORTS = ("stdio", "sse", "streamable-http")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000
    registry_port: int = 8001
    log_level: str = "INFO"
    float_strategy: FloatStrategy = FloatStrategy.UNIFORM53

    def __post_init__(self):
        if self.transport not in TRANSPORTS:
            raise ValueError(f"transport must be one of {', '.join(TRANSPORTS)}, got {self.transport!r}")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")
        for port in (self.port, self.registry_port):
            if not 0 < port < 65536:
                raise ValueError(f"port out of range: {port}")

    @classmethod
    def from_env(cls, environ=None, dotenv: bool = True) -> "Settings":
        """Build settings from MCP_RANDOM_* variables, reading .env first when asked"""
        if dotenv:
            load_dotenv()
        env = os.environ if environ is None else environ

        try:
            float_strategy = FloatStrategy(env.get("MCP_RANDOM_FLOAT_STRATEGY", "uniform53"))
        except ValueError:
            choices = ", ".join(s.value for s in FloatStrategy)
            raise ValueError(f"MCP_RANDOM_FLOAT_STRATEGY must be one of {choices}") from None

        return cls(
            transport=env.get("MCP_RANDOM_TRANSPORT", "stdio"),
            host=env.get("MCP_RANDOM_HOST", "127.0.0.1"),
            port=int(env.get("MCP_RANDOM_PORT", "8000")),
            registry_port=int(env.get("MCP_RANDOM_REGISTRY_PORT", "8001")),
            log_level=env.get("MCP_RANDOM_LOG_LEVEL", "INFO").upper(),
            float_strategy=float_strategy,
        )
