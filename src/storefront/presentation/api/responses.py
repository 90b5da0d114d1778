"""Response envelope helpers.

Every endpoint answers with the same JSON shape:

    {"status": "success", "payload": ...}
    {"status": "success", "message": "..."}
    {"status": "error", "error": "..."}
"""

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from storefront.domain.user import PublicUser
from storefront.presentation.api.schemas import UserResponse


def user_payload(user: PublicUser) -> dict[str, Any]:
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        age=user.age,
        role=user.role.value,
    ).model_dump(mode="json")


def send_success_payload(
    data: Any,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    if isinstance(data, PublicUser):
        data = user_payload(data)
    return JSONResponse(
        status_code=status_code,
        content={"status": "success", "payload": jsonable_encoder(data)},
    )


def send_success_message(
    message: str,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "success", "message": message},
    )


def _send_error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "error": message},
    )


def send_user_error(message: str) -> JSONResponse:
    return _send_error(message, status.HTTP_400_BAD_REQUEST)


def send_unauthorized(message: str = "Not authenticated") -> JSONResponse:
    return _send_error(message, status.HTTP_401_UNAUTHORIZED)


def send_server_error(message: str) -> JSONResponse:
    return _send_error(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
