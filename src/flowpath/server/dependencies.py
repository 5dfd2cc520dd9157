"""FastAPI dependencies for server endpoints.

Uses dependency injection instead of global state for better
testability and multi-worker safety.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from flowpath.runtime.router import SessionRouter


def get_router(request: Request) -> SessionRouter:
    """Dependency to get the initialized SessionRouter.

    Raises:
        HTTPException: 503 if the router is not initialized
    """
    router = getattr(request.app.state, "router", None)

    if router is None:
        raise HTTPException(
            status_code=503,
            detail={
                "error": "Service temporarily unavailable",
                "message": "Server is starting up or not configured.",
            },
        )

    return router


# Type aliases for cleaner endpoint signatures
RouterDep = Annotated[SessionRouter, Depends(get_router)]
