# socialhub/core/responses.py
"""
모든 API 응답을 {"success", "message", ...} 형식으로 통일하기 위한 헬퍼.
"""
from flask import jsonify

from socialhub.core.errors import ServiceError


def success_response(message: str, status: int = 200, **payload):
    body = {"success": True, "message": message}
    body.update(payload)
    return jsonify(body), status


def error_response(err: ServiceError):
    return jsonify({
        "success": False,
        "error_code": err.error_code,
        "message": err.message
    }), err.status_code


def validation_error_response(messages):
    """marshmallow ValidationError.messages를 400 응답으로 변환합니다."""
    return jsonify({
        "success": False,
        "error_code": "VALIDATION_ERROR",
        "message": "요청 값이 올바르지 않습니다.",
        "details": messages
    }), 400


def server_error_response(message: str, err: Exception, error_code: str = "INTERNAL_SERVER_ERROR"):
    """예상하지 못한 오류. 원인(error)을 함께 반환합니다."""
    return jsonify({
        "success": False,
        "error_code": error_code,
        "message": message,
        "error": str(err)
    }), 500
