"""HTTP catalog of randomness operations, with invocation over REST"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional, List

from fastapi import Body, FastAPI, HTTPException, Query
from pydantic import BaseModel

from mcp_random.config import LOG_LEVELS, Settings
from mcp_random.engine.core import RandomnessEngine
from mcp_random.engine.errors import UnknownOperationError
from mcp_random.operations import OPERATIONS, Operation, dispatch, get_operation

logger = logging.getLogger(__name__)


class OperationEntry(BaseModel):
    name: str
    description: str


class OperationDetail(OperationEntry):
    input_schema: dict[str, Any]


class OperationsResponse(BaseModel):
    operations: List[OperationEntry]
    metadata: dict


class InvocationResponse(BaseModel):
    operation: str
    text: str
    is_error: bool


def _lookup(name: str) -> Operation:
    try:
        return get_operation(name)
    except UnknownOperationError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None


def create_app(engine: RandomnessEngine | None = None) -> FastAPI:
    engine = engine or RandomnessEngine()
    app = FastAPI(title="mcp-random catalog", description="Cryptographically secure randomness operations")

    @app.get("/v0/operations", response_model=OperationsResponse)
    async def list_operations(
        limit: int = Query(default=30, ge=1, le=100),
        cursor: Optional[str] = Query(default=None),
    ):
        """List operations with cursor pagination; the cursor is the last name seen"""
        names = list(OPERATIONS)
        start_idx = 0
        if cursor:
            if cursor not in OPERATIONS:
                raise HTTPException(status_code=400, detail=f"Unknown cursor: {cursor}")
            start_idx = names.index(cursor) + 1

        end_idx = min(start_idx + limit, len(names))
        page = [OPERATIONS[name] for name in names[start_idx:end_idx]]

        next_cursor = None
        if end_idx < len(names):
            next_cursor = names[end_idx - 1]

        return OperationsResponse(
            operations=[OperationEntry(name=op.name, description=op.description) for op in page],
            metadata={"next_cursor": next_cursor, "count": len(page)},
        )

    @app.get("/v0/operations/{name}", response_model=OperationDetail)
    async def get_operation_details(name: str):
        """Describe one operation, including the JSON schema of its arguments"""
        op = _lookup(name)
        return OperationDetail(
            name=op.name,
            description=op.description,
            input_schema=op.params.model_json_schema(),
        )

    @app.post("/v0/operations/{name}", response_model=InvocationResponse)
    def invoke_operation(name: str, arguments: Optional[dict[str, Any]] = Body(default=None)):
        """Run an operation; input errors come back as text with is_error set"""
        _lookup(name)
        text = dispatch(name, arguments or {}, engine)
        return InvocationResponse(operation=name, text=text, is_error=text.startswith("Error: "))

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "entropy_source": engine.source.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()


def main(argv=None) -> None:
    """Run the operation catalog"""
    import uvicorn

    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description="HTTP catalog for mcp-random operations.")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.registry_port)
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=settings.log_level)
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Serving operation catalog on %s:%d", args.host, args.port)
    uvicorn.run(
        create_app(RandomnessEngine(float_strategy=settings.float_strategy)),
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
