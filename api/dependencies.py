"""
FastAPI dependencies.

The running DigitalTwin lives on ``app.state`` and is created by the
application lifespan. Routes receive it through ``get_twin``.
"""

from fastapi import HTTPException, Request, status

from core.twin import DigitalTwin


def get_twin(request: Request) -> DigitalTwin:
    """
    Dependency that provides the running engine.

    Raises:
        HTTPException: 503 if the engine has not been started
    """
    twin = getattr(request.app.state, "twin", None)
    if twin is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Digital twin engine is not running"
        )
    return twin
