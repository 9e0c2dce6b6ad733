"""Web API 端点测试"""

from __future__ import annotations

import pytest

from inspector.web.app import app


@pytest.fixture()
def client(config, monkeypatch: pytest.MonkeyPatch):
    """Flask 测试客户端，临时数据目录"""
    import inspector.core.config as cfgmod
    from inspector.services.container import reset_container
    monkeypatch.setattr(cfgmod, "_current", config)
    reset_container()
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c
    reset_container()


class TestGlobalErrorHandlers:
    def test_404_returns_json(self, client) -> None:
        resp = client.get("/api/nonexistent")
        assert resp.status_code == 404
        assert "error" in resp.get_json()

    def test_405_returns_json(self, client) -> None:
        resp = client.delete("/api/repositories")
        assert resp.status_code == 405
        assert "error" in resp.get_json()

    def test_health(self, client) -> None:
        assert client.get("/api/health").get_json()["status"] == "ok"


class TestRepositoriesApi:
    def test_add_get_list_delete(self, client) -> None:
        resp = client.post("/api/repositories", json={"key": "npm-remote", "package_type": "npm", "repo_type": "remote"})
        assert resp.status_code == 201
        assert client.get("/api/repositories/npm-remote").get_json()["repository"] == {
            "key": "npm-remote", "package_type": "npm", "repo_type": "remote",
        }
        names = [r["name"] for r in client.get("/api/repositories").get_json()["repositories"]]
        assert names == ["npm-remote"]
        assert client.delete("/api/repositories/npm-remote").status_code == 200
        assert client.get("/api/repositories/npm-remote").status_code == 404

    def test_add_requires_key(self, client) -> None:
        assert client.post("/api/repositories", json={}).status_code == 400

    def test_add_bad_repo_type(self, client) -> None:
        resp = client.post("/api/repositories", json={"key": "a", "package_type": "npm", "repo_type": "cloud"})
        assert resp.status_code == 400

    def test_add_missing_package_type(self, client) -> None:
        resp = client.post("/api/repositories", json={"key": "a"})
        assert resp.status_code == 400
        assert resp.get_json()["code"] == "VALIDATION_ERROR"


class TestInspectionApi:
    def test_track_unknown_repository(self, client) -> None:
        resp = client.post("/api/inspection/repos", json={"key": "ghost"})
        assert resp.status_code == 404
        assert resp.get_json()["code"] == "NOT_FOUND"

    def test_track_list_untrack(self, client) -> None:
        client.post("/api/repositories", json={"key": "a", "package_type": "maven"})
        client.post("/api/inspection/repos", json={"key": "a"})
        assert client.get("/api/inspection/repos").get_json()["repos"] == ["a"]
        assert client.delete("/api/inspection/repos/a").status_code == 200
        assert client.delete("/api/inspection/repos/a").status_code == 404

    def test_initialize_returns_summary(self, client) -> None:
        client.post("/api/repositories", json={"key": "a", "package_type": "maven"})
        client.post("/api/repositories", json={"key": "b", "package_type": "docker"})
        client.post("/api/inspection/repos", json={"key": "a"})
        client.post("/api/inspection/repos", json={"key": "b"})
        data = client.post("/api/plugins/execute/blackDuckInitializeRepositories").get_json()
        assert data["total"] == 2
        assert data["succeeded"] == 1
        assert data["failed"] == 1
        reasons = {o["key"]: o["reason"] for o in data["outcomes"]}
        assert reasons == {"a": None, "b": "UNSUPPORTED_PACKAGE_TYPE"}

    def test_status_report(self, client) -> None:
        client.post("/api/repositories", json={"key": "a", "package_type": "maven"})
        client.post("/api/inspection/repos", json={"key": "a"})
        client.post("/api/plugins/execute/blackDuckInitializeRepositories")
        data = client.get("/api/plugins/execute/blackDuckInspectionStatus").get_json()
        assert data["repositories"] == [{"key": "a", "status": ["SUCCESS"]}]

    def test_unknown_plugin_execution(self, client) -> None:
        assert client.post("/api/plugins/execute/nope").status_code == 404

    def test_set_modules_state(self, client) -> None:
        client.post("/api/repositories", json={"key": "a", "package_type": "maven"})
        client.post("/api/inspection/repos", json={"key": "a"})
        resp = client.post("/api/plugins/execute/blackDuckSetModulesState?InspectionModule=false")
        assert resp.get_json()["modules"] == {"InspectionModule": False}
        assert client.get("/api/plugins/execute/blackDuckInspectionStatus").get_json()["enabled"] is False
        data = client.post("/api/plugins/execute/blackDuckInitializeRepositories").get_json()
        assert data["total"] == 0

        client.post("/api/plugins/execute/blackDuckSetModulesState?inspection=on")
        data = client.post("/api/plugins/execute/blackDuckInitializeRepositories").get_json()
        assert data["succeeded"] == 1


class TestStorageApi:
    def test_unknown_repository_404(self, client) -> None:
        assert client.get("/api/storage/ghost?properties").status_code == 404

    def test_put_and_filter_properties(self, client) -> None:
        client.post("/api/repositories", json={"key": "a", "package_type": "maven"})
        resp = client.put("/api/storage/a", json={"properties": {"x": ["1"], "y": ["2", "3"]}})
        assert resp.status_code == 200
        assert client.get("/api/storage/a").get_json()["properties"] == {"x": ["1"], "y": ["2", "3"]}
        assert client.get("/api/storage/a?properties=y").get_json()["properties"] == {"y": ["2", "3"]}

    def test_put_rejects_scalar_values(self, client) -> None:
        client.post("/api/repositories", json={"key": "a", "package_type": "maven"})
        resp = client.put("/api/storage/a", json={"properties": {"x": "1"}})
        assert resp.status_code == 400

    def test_delete_property(self, client) -> None:
        client.post("/api/repositories", json={"key": "a", "package_type": "maven"})
        client.put("/api/storage/a", json={"properties": {"blackduck.inspection.status": ["SUCCESS"]}})
        assert client.delete("/api/storage/a/blackduck.inspection.status").status_code == 200
        assert client.delete("/api/storage/a/blackduck.inspection.status").status_code == 404
