"""Web 层统一响应辅助函数"""

from __future__ import annotations

from flask import Response, jsonify

from inspector.core.exceptions import InspectorError

# 业务异常 code -> HTTP 状态码
_STATUS_BY_CODE = {
    "NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
    "CONFIG_ERROR": 500,
    "PROPERTY_WRITE_ERROR": 500,
    "SETUP_FAILURE": 500,
}


def not_found(resource: str) -> tuple[Response, int]:
    return jsonify(error=f"{resource}不存在"), 404


def bad_request(message: str) -> tuple[Response, int]:
    return jsonify(error=message), 400


def from_error(exc: InspectorError) -> tuple[Response, int]:
    """业务异常 -> JSON 错误响应"""
    return jsonify(error=str(exc), code=exc.code), _STATUS_BY_CODE.get(exc.code, 500)
