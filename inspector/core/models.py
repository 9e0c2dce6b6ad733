"""核心数据模型

包类型、仓库、检查状态、属性键，以及一轮初始化的结果模型。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# =========================================================================
# 包类型
# =========================================================================


class PackageType(Enum):
    """宿主的默认包类型（封闭集合）"""

    ALPINE = "alpine"
    BOWER = "bower"
    CARGO = "cargo"
    CHEF = "chef"
    COCOAPODS = "cocoapods"
    COMPOSER = "composer"
    CONAN = "conan"
    CONDA = "conda"
    CRAN = "cran"
    DEBIAN = "debian"
    DOCKER = "docker"
    GEMS = "gems"
    GENERIC = "generic"
    GITLFS = "gitlfs"
    GO = "go"
    GRADLE = "gradle"
    HELM = "helm"
    IVY = "ivy"
    MAVEN = "maven"
    NPM = "npm"
    NUGET = "nuget"
    OPKG = "opkg"
    P2 = "p2"
    PUPPET = "puppet"
    PYPI = "pypi"
    RPM = "rpm"
    SBT = "sbt"
    VAGRANT = "vagrant"
    VCS = "vcs"
    YUM = "yum"


class SupportedPackageType(Enum):
    """扫描器能检查的包类型：(包类型, forge, 默认制品匹配模式)"""

    BOWER = ("bower", "bower", "*.tar.gz")
    COCOAPODS = ("cocoapods", "cocoapods", "*.tar.gz")
    COMPOSER = ("composer", "packagist", "*.zip")
    CONDA = ("conda", "anaconda", "*.tar.bz2")
    CRAN = ("cran", "cran", "*.tar.gz")
    GEMS = ("gems", "rubygems", "*.gem")
    GO = ("go", "golang", "*.zip")
    GRADLE = ("gradle", "maven", "*.jar")
    MAVEN = ("maven", "maven", "*.jar")
    NPM = ("npm", "npmjs", "*.tgz")
    NUGET = ("nuget", "nuget", "*.nupkg")
    PYPI = ("pypi", "pypi", "*.whl,*.tar.gz,*.zip,*.egg")

    def __init__(self, package_type: str, forge: str, default_patterns: str) -> None:
        self.package_type = package_type
        self.forge = forge
        self.default_patterns = default_patterns

    @classmethod
    def get_as_supported(cls, package_type: Any) -> SupportedPackageType | None:
        """按包类型标识查找（大小写不敏感），未知或非法输入返回 None"""
        if not isinstance(package_type, str):
            return None
        wanted = package_type.strip().lower()
        for member in cls:
            if member.package_type == wanted:
                return member
        return None


class RepositoryType(Enum):
    LOCAL = "local"
    REMOTE = "remote"
    VIRTUAL = "virtual"


# =========================================================================
# 仓库
# =========================================================================


@dataclass
class Repository:
    """由外部创建的仓库记录，本引擎只打标签不增删"""

    key: str
    package_type: str
    repo_type: RepositoryType | str = RepositoryType.LOCAL

    def to_dict(self) -> dict[str, str]:
        return {
            "key": self.key,
            "package_type": self.package_type,
            "repo_type": getattr(self.repo_type, "value", self.repo_type),
        }

    @classmethod
    def from_dict(cls, key: str, entry: dict[str, Any]) -> Repository:
        raw = str(entry.get("repo_type", "local"))
        try:
            repo_type: RepositoryType | str = RepositoryType(raw)
        except ValueError:
            # 外部供给方登记的其他仓库种类原样保留
            repo_type = raw
        return cls(key=key, package_type=str(entry.get("package_type", "")), repo_type=repo_type)


# =========================================================================
# 检查状态与属性
# =========================================================================


class InspectionStatus(Enum):
    """写入属性的值为成员名（区分大小写）"""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class InspectionProperty(Enum):
    """仓库上的约定属性键"""

    INSPECTION_STATUS = "blackduck.inspection.status"
    INSPECTION_STATUS_MESSAGE = "blackduck.inspection.status.message"
    LAST_INSPECTION = "blackduck.inspection.time"
    PROJECT_NAME = "blackduck.projectName"
    PROJECT_VERSION_NAME = "blackduck.projectVersionName"


class FailureReason(Enum):
    """失败原因 — 存储值同为 FAILURE 时用于区分来源"""

    UNSUPPORTED_PACKAGE_TYPE = "UNSUPPORTED_PACKAGE_TYPE"
    SETUP_FAILED = "SETUP_FAILED"
    REPOSITORY_NOT_FOUND = "REPOSITORY_NOT_FOUND"
    REPOSITORY_UNREADABLE = "REPOSITORY_UNREADABLE"
    WRITE_FAILED = "WRITE_FAILED"


# =========================================================================
# 初始化结果
# =========================================================================


@dataclass
class RepositoryOutcome:
    """单个仓库在一轮初始化中的结果

    status 为 None 表示本轮没有写入（仓库不存在或写入失败）。
    """

    key: str
    status: InspectionStatus | None = None
    reason: FailureReason | None = None
    message: str = ""
    written: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "status": self.status.name if self.status else None,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
            "written": self.written,
        }


@dataclass
class InitializationSummary:
    """一轮初始化的汇总，结果顺序与输入顺序一致"""

    outcomes: list[RepositoryOutcome] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)  # 取消后未处理的仓库
    cancelled: bool = False

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.written and o.status is InspectionStatus.SUCCESS)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.written and o.status is InspectionStatus.FAILURE)

    @property
    def errors(self) -> int:
        return sum(1 for o in self.outcomes if not o.written)

    def get(self, key: str) -> RepositoryOutcome | None:
        for outcome in self.outcomes:
            if outcome.key == key:
                return outcome
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "errors": self.errors,
            "cancelled": self.cancelled,
            "skipped": list(self.skipped),
            "outcomes": [o.to_dict() for o in self.outcomes],
        }
