# workhub/core/exceptions.py
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

ADMINS_ONLY = "Forbidden: Admins only"
INSUFFICIENT_ROLE = "Access denied. Insufficient role."


class ForbiddenError(Exception):
    """Raised by the role guards. Rendered as 403 {"message": ...}."""

    def __init__(self, message: str = ADMINS_ONLY):
        super().__init__(message)
        self.message = message


async def forbidden_handler(request: Request, exc: ForbiddenError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"message": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ForbiddenError, forbidden_handler)
