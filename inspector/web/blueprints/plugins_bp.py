"""插件执行 API Blueprint

与宿主的插件执行端点保持同一路径，宿主或运维可直接触发一轮初始化。
"""

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from inspector.web.responses import not_found

plugins_bp = Blueprint("plugins", __name__, url_prefix="/api/plugins")


def _driver():  # type: ignore[no-untyped-def]
    from inspector.services.container import get_container
    return get_container().driver


def _initialize_repositories() -> Response:
    summary = _driver().run_initialization()
    return jsonify(summary.to_dict())


def _inspection_status() -> Response:
    return jsonify(_driver().status_report())


def _set_modules_state() -> Response:
    """?InspectionModule=false 形式按模块名启停"""
    applied = _driver().set_modules_state(request.args.to_dict(flat=False))
    return jsonify(modules=applied)


# 可执行的插件函数
_EXECUTIONS = {
    "blackDuckInitializeRepositories": _initialize_repositories,
    "blackDuckInspectionStatus": _inspection_status,
    "blackDuckSetModulesState": _set_modules_state,
}


@plugins_bp.route("/execute/<name>", methods=["POST", "GET"])
def execute(name: str) -> tuple[Response, int] | Response:
    handler = _EXECUTIONS.get(name)
    if handler is None:
        return not_found(f"插件函数 {name} ")
    return handler()
