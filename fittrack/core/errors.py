# core/errors.py
from fastapi import status


class FitTrackError(Exception):
    """요청 경계에서 {"error": message} 응답으로 변환되는 예외의 기반 클래스."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(FitTrackError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "You must be logged in to access this resource"


class Forbidden(FitTrackError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(FitTrackError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationError(FitTrackError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class Conflict(FitTrackError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


# 자격 증명 검증 실패. 어떤 분기인지는 서버 로그에만 남긴다.
class AuthenticationError(Unauthenticated):
    default_message = "Invalid email or password"
    reason = "authentication failed"


class UserNotFound(AuthenticationError):
    reason = "user not found"


class NoPasswordSet(AuthenticationError):
    reason = "no password set"


class InvalidCredentials(AuthenticationError):
    reason = "invalid password"
