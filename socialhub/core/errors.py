# socialhub/core/errors.py
"""
서비스 계층에서 발생시키는 도메인 예외 정의.

각 예외는 API 응답으로 변환될 때 사용할 error_code와 HTTP 상태 코드를 함께 가집니다.
라우트는 ServiceError를 잡아 그대로 응답으로 변환합니다.
"""

class ServiceError(Exception):
    """모든 도메인 예외의 기반 클래스."""
    error_code = "SERVICE_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(ServiceError):
    """필수 입력이 누락되었거나 형식이 올바르지 않은 경우."""
    error_code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(ServiceError):
    """참조한 리소스(사용자, 게시물, 댓글)가 존재하지 않는 경우."""
    error_code = "RESOURCE_NOT_FOUND"
    status_code = 404


class ForbiddenError(ServiceError):
    """리소스에 대한 권한(소유권)이 없는 경우."""
    error_code = "FORBIDDEN"
    status_code = 403


class UnauthorizedError(ServiceError):
    """요청에서 사용자 신원을 확인할 수 없는 경우."""
    error_code = "UNAUTHORIZED"
    status_code = 401


class MediaUploadError(ServiceError):
    """외부 미디어 호스팅 업로드 실패."""
    error_code = "MEDIA_UPLOAD_FAILED"
    status_code = 502
