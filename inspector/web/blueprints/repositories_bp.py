"""仓库登记与检查跟踪 API Blueprint"""

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from inspector.core.exceptions import InspectorError
from inspector.web.responses import bad_request, from_error, not_found

repositories_bp = Blueprint("repositories", __name__, url_prefix="/api")


def _svc():  # type: ignore[no-untyped-def]
    from inspector.services.container import get_container
    return get_container()


@repositories_bp.route("/repositories", methods=["GET"])
def list_all() -> Response:
    return jsonify(repositories=_svc().repositories.list_all())


@repositories_bp.route("/repositories/<key>", methods=["GET"])
def get(key: str) -> tuple[Response, int] | Response:
    repository = _svc().repositories.get(key)
    if repository is None:
        return not_found("仓库")
    return jsonify(repository=repository.to_dict())


@repositories_bp.route("/repositories", methods=["POST"])
def add() -> tuple[Response, int] | Response:
    from inspector.core.models import Repository, RepositoryType
    body = request.get_json(silent=True) or {}
    key = body.get("key", "")
    if not key:
        return bad_request("需要提供 key")
    try:
        repo_type = RepositoryType(body.get("repo_type", "local"))
    except ValueError:
        return bad_request(f"不支持的仓库类型: {body.get('repo_type')}")
    try:
        entry = _svc().repositories.create(
            Repository(key=key, package_type=body.get("package_type", ""), repo_type=repo_type),
        )
    except InspectorError as e:
        return from_error(e)
    return jsonify(message=f"仓库已登记: {key}", repository={"key": key, **entry}), 201


@repositories_bp.route("/repositories/<key>", methods=["DELETE"])
def delete(key: str) -> tuple[Response, int] | Response:
    svc = _svc()
    if not svc.repositories.delete(key):
        return not_found("仓库")
    svc.driver.untrack(key)
    svc.properties.clear(key)
    return jsonify(message=f"仓库已删除: {key}")


@repositories_bp.route("/inspection/repos", methods=["GET"])
def tracked() -> Response:
    return jsonify(repos=_svc().driver.tracked())


@repositories_bp.route("/inspection/repos", methods=["POST"])
def track() -> tuple[Response, int] | Response:
    body = request.get_json(silent=True) or {}
    key = body.get("key", "")
    if not key:
        return bad_request("需要提供 key")
    try:
        _svc().driver.track(key)
    except InspectorError as e:
        return from_error(e)
    return jsonify(message=f"已加入检查: {key}")


@repositories_bp.route("/inspection/repos/<key>", methods=["DELETE"])
def untrack(key: str) -> tuple[Response, int] | Response:
    if _svc().driver.untrack(key):
        return jsonify(message=f"已移出检查: {key}")
    return not_found("检查中的仓库")
