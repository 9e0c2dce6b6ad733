"""HTTP 接口（基于 Flask）

宿主适配层：插件执行、仓库属性查询、仓库登记与检查跟踪。
所有错误统一返回 JSON。

启动方式: inspector serve --port 8888
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from inspector.core.exceptions import InspectorError
from inspector.web.blueprints import plugins_bp, repositories_bp, storage_bp
from inspector.web.responses import from_error

logger = logging.getLogger(__name__)

app = Flask(__name__)

for _bp in (plugins_bp, storage_bp, repositories_bp):
    app.register_blueprint(_bp)


@app.errorhandler(HTTPException)
def handle_http_exception(exc):
    return jsonify(error=exc.description), exc.code


@app.errorhandler(InspectorError)
def handle_inspector_error(exc):
    return from_error(exc)


@app.errorhandler(Exception)
def handle_generic_exception(exc):  # noqa: ARG001
    logger.exception("未处理的异常")
    return jsonify(error="服务器内部错误"), 500


@app.route("/api/health")
def health():
    from inspector import __version__
    return jsonify(status="ok", version=__version__)


def run_server(port: int = 8888, debug: bool = False, host: str = "127.0.0.1") -> None:
    logger.info("repo-inspector 接口已启动: http://%s:%d", host, port)
    app.run(host=host, port=port, debug=debug)
