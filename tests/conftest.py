"""共享测试夹具：临时数据目录下的配置与服务容器"""

from __future__ import annotations

from pathlib import Path

import pytest

from inspector.core.config import Config
from inspector.core.models import Repository, RepositoryType
from inspector.services.container import ServiceContainer


@pytest.fixture()
def config(tmp_path: Path) -> Config:
    return Config(
        repositories_file=str(tmp_path / "repositories.yml"),
        properties_file=str(tmp_path / "properties.yml"),
        tracking_file=str(tmp_path / "inspection.yml"),
        projects_file=str(tmp_path / "projects.yml"),
        max_workers=4,
        project_version_name="ci",
    )


@pytest.fixture()
def container(config: Config) -> ServiceContainer:
    return ServiceContainer(config=config)


@pytest.fixture()
def make_repo(container: ServiceContainer):
    """登记仓库的快捷方式"""

    def _make(key: str, package_type: str, repo_type: RepositoryType = RepositoryType.REMOTE) -> Repository:
        repo = Repository(key=key, package_type=package_type, repo_type=repo_type)
        container.repositories.create(repo)
        return repo

    return _make
