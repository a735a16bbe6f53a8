"""核心数据模型

包、仓库归属集合、依赖约束、解析变更等实体集中定义，
数据库、解析器与拉取核心统一从此处导入。
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from pkgfetch.core.version import (
    VersionMask,
    VersionResult,
    compare_versions,
    mask_to_operator,
    version_matches,
)


@dataclass(frozen=True)
class RepositorySet:
    """包的仓库归属集合: 按仓库槽位升序迭代"""

    indices: frozenset[int] = frozenset()

    @classmethod
    def of(cls, indices: Iterable[int]) -> RepositorySet:
        return cls(frozenset(indices))

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.indices))

    def __contains__(self, index: object) -> bool:
        return index in self.indices

    def __len__(self) -> int:
        return len(self.indices)


@dataclass(frozen=True)
class Dependency:
    """依赖约束: 包名 + 版本约束掩码"""

    name: str
    mask: VersionMask = VersionMask.REQUIRE
    version: str = ""

    def satisfied_by(self, package: Package) -> bool:
        return package.name == self.name and version_matches(
            package.version, self.mask, self.version,
        )

    def __str__(self) -> str:
        if self.mask == VersionMask.REQUIRE:
            return self.name
        return f"{self.name}{mask_to_operator(self.mask)}{self.version}"


@dataclass(frozen=True)
class Package:
    """单个包版本（一个可下载制品）的元信息

    size 为声明大小，是下载校验的唯一依据。
    """

    name: str
    version: str
    size: int
    repos: RepositorySet = field(default_factory=RepositorySet)
    depends: tuple[Dependency, ...] = ()
    description: str = ""

    @property
    def id(self) -> str:
        return f"{self.name}-{self.version}"

    def artifact_name(self, extension: str) -> str:
        return f"{self.id}.{extension}"


@dataclass
class NameRecord:
    """包名记录，持有该名称下的全部包版本（可能为空）"""

    name: str
    packages: list[Package] = field(default_factory=list)


def latest_package(packages: Iterable[Package]) -> Package | None:
    """选出版本最高的包

    按给定顺序扫描，只有严格 GREATER 才替换当前候选，版本相同时先出现者胜出。
    """
    best: Package | None = None
    for pkg in packages:
        if best is None or compare_versions(pkg.version, best.version) is VersionResult.GREATER:
            best = pkg
    return best


@dataclass(frozen=True)
class Change:
    """解析结果中的一条变更: old_package 为已安装版本（可能为空）"""

    new_package: Package
    old_package: Package | None = None
