from typing import Any, Generic, TypeVar

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

T = TypeVar("T")


class SuccessEnvelope(BaseModel, Generic[T]):
    data: T


class ErrorBody(BaseModel):
    msg: str


class ErrorEnvelope(BaseModel):
    error: ErrorBody


def success(status_code: int, data: Any) -> JSONResponse:
    """Wrap ``data`` as ``{"data": ...}``."""
    return JSONResponse(
        status_code=status_code, content={"data": jsonable_encoder(data)}
    )


def error(status_code: int, err: Exception | str) -> JSONResponse:
    """Wrap an error as ``{"error": {"msg": ...}}``."""
    return JSONResponse(
        status_code=status_code, content={"error": {"msg": str(err)}}
    )
