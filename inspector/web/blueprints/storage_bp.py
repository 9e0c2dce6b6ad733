"""仓库属性 API Blueprint"""

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from inspector.core.exceptions import InspectorError
from inspector.web.responses import bad_request, from_error

storage_bp = Blueprint("storage", __name__, url_prefix="/api/storage")


def _properties():  # type: ignore[no-untyped-def]
    from inspector.services.container import get_container
    return get_container().properties


@storage_bp.route("/<repo_key>", methods=["GET"])
def get_properties(repo_key: str) -> tuple[Response, int] | Response:
    try:
        properties = _properties().get_properties(repo_key)
    except InspectorError as e:
        return from_error(e)
    wanted = request.args.get("properties", "")
    if wanted:
        names = {n.strip() for n in wanted.split(",") if n.strip()}
        properties = {k: v for k, v in properties.items() if k in names}
    return jsonify(uri=request.base_url, properties=properties)


@storage_bp.route("/<repo_key>", methods=["PUT"])
def set_properties(repo_key: str) -> tuple[Response, int] | Response:
    body = request.get_json(silent=True) or {}
    updates = body.get("properties")
    if not isinstance(updates, dict) or not updates:
        return bad_request("需要提供 properties 映射")
    try:
        _properties().set_properties(repo_key, updates)
    except InspectorError as e:
        return from_error(e)
    return jsonify(message=f"属性已更新: {repo_key}")


@storage_bp.route("/<repo_key>/<path:property_key>", methods=["DELETE"])
def delete_property(repo_key: str, property_key: str) -> tuple[Response, int] | Response:
    try:
        removed = _properties().delete_property(repo_key, property_key)
    except InspectorError as e:
        return from_error(e)
    if not removed:
        return jsonify(error=f"属性不存在: {property_key}"), 404
    return jsonify(message=f"属性已删除: {property_key}")
