from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.services.errors import (
    BillNumberGenerationFailed,
    DuplicateInCart,
    EmptyCart,
    NotFound,
    PartialWriteFailure,
    PosError,
    SoldOut,
    StoreUnavailable,
    Unavailable,
)

# Most specific classes first; SoldOut is an Unavailable.
STATUS_BY_ERROR: list[tuple[type[PosError], int]] = [
    (NotFound, status.HTTP_404_NOT_FOUND),
    (SoldOut, status.HTTP_409_CONFLICT),
    (Unavailable, status.HTTP_409_CONFLICT),
    (DuplicateInCart, status.HTTP_409_CONFLICT),
    (EmptyCart, status.HTTP_400_BAD_REQUEST),
    (BillNumberGenerationFailed, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (PartialWriteFailure, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (StoreUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(exc: PosError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def pos_error_handler(_: Request, exc: PosError) -> JSONResponse:
    headers = {"Retry-After": "1"} if isinstance(exc, StoreUnavailable) else None
    return JSONResponse(
        status_code=status_for(exc),
        content={"detail": exc.message, "code": exc.code, **exc.details},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PosError, pos_error_handler)
