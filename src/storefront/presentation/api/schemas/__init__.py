from storefront.presentation.api.schemas.sessions import (
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    RestorePasswordRequest,
    SuccessMessageResponse,
    SuccessPayloadResponse,
    UserResponse,
)

__all__ = [
    "ErrorResponse",
    "LoginRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "RestorePasswordRequest",
    "SuccessMessageResponse",
    "SuccessPayloadResponse",
    "UserResponse",
]
