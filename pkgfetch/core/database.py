"""包数据库: 从 YAML 索引加载已知包、包名与仓库配置

索引文件格式:

    repositories:                 # 列表下标即仓库槽位
      - http://mirror.example.com/main
      - /var/cache/pkgfetch/local
    packages:
      busybox:
        - version: 1.36.1-r2
          size: 512034
          repos: [0, 1]
          depends: [musl>=1.2]
    installed:                    # 可选，OpenFlags.NO_STATE 时不读取
      busybox: 1.36.1-r1

仅出现在 depends 中的名称也是已知名称，但没有任何包版本。

用法:
    with PackageDatabase.open("/", OpenFlags.NO_STATE) as db:
        record = db.lookup_name("busybox")
        url = db.repository_url(0)
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from pkgfetch.core.exceptions import ConfigError
from pkgfetch.core.models import NameRecord, Package, RepositorySet
from pkgfetch.core.resolver import parse_dependency
from pkgfetch.core.version import is_valid_version
from pkgfetch.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_INDEX_FILE = "etc/pkgfetch/index.yml"
DEFAULT_MAX_REPOS = 8


class OpenFlags(enum.IntFlag):
    """数据库打开标志"""

    NONE = 0
    NO_STATE = 1  # 不加载已安装状态


class PackageDatabase:
    """包数据库

    由 open() 打开，使用完毕必须 close()（或用 with 语句）。
    关闭后任何查询都会抛出 ConfigError。
    """

    def __init__(
        self,
        repositories: list[str],
        names: dict[str, NameRecord],
        installed: dict[str, str] | None = None,
    ) -> None:
        self._repositories = repositories
        self._names = names
        self._installed = installed or {}
        self._closed = False

    # ------------------------------------------------------------------
    # 打开 / 关闭
    # ------------------------------------------------------------------

    @classmethod
    def open(
        cls,
        root: str | Path,
        flags: OpenFlags = OpenFlags.NONE,
        *,
        index_file: str = DEFAULT_INDEX_FILE,
        max_repos: int = DEFAULT_MAX_REPOS,
    ) -> PackageDatabase:
        """打开 root 下的包索引

        Raises:
            ConfigError: 索引不存在、无法解析或内容非法
        """
        index_path = Path(root) / index_file
        if not index_path.is_file():
            raise ConfigError(f"包索引不存在: {index_path}")
        try:
            data = load_yaml(index_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"包索引无法读取: {index_path} - {e}") from e

        db = cls.from_dict(data, flags=flags, max_repos=max_repos)
        logger.debug(
            "数据库已打开: %s (%d 个仓库, %d 个包名)",
            index_path, len(db._repositories), len(db._names),
        )
        return db

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        flags: OpenFlags = OpenFlags.NONE,
        max_repos: int = DEFAULT_MAX_REPOS,
    ) -> PackageDatabase:
        """从已解析的索引字典构建数据库"""
        repositories = [str(r).rstrip("/") for r in data.get("repositories") or []]
        if len(repositories) > max_repos:
            raise ConfigError(
                f"仓库数量 {len(repositories)} 超过上限 {max_repos}"
            )

        names: dict[str, NameRecord] = {}
        for name, variants in (data.get("packages") or {}).items():
            record = names.setdefault(name, NameRecord(name=name))
            for entry in variants or []:
                record.packages.append(
                    _parse_package(name, entry, len(repositories)),
                )

        # 仅被依赖引用的名称: 已知但无包版本
        for record in list(names.values()):
            for pkg in record.packages:
                for dep in pkg.depends:
                    names.setdefault(dep.name, NameRecord(name=dep.name))

        installed: dict[str, str] = {}
        if not flags & OpenFlags.NO_STATE:
            installed = {
                str(k): str(v) for k, v in (data.get("installed") or {}).items()
            }

        return cls(repositories, names, installed)

    def close(self) -> None:
        if self._closed:
            return
        self._names = {}
        self._repositories = []
        self._installed = {}
        self._closed = True
        logger.debug("数据库已关闭")

    def __enter__(self) -> PackageDatabase:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ConfigError("数据库已关闭")

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def lookup_name(self, name: str) -> NameRecord | None:
        self._check_open()
        return self._names.get(name)

    def iter_names(self) -> Iterator[NameRecord]:
        self._check_open()
        for name in sorted(self._names):
            yield self._names[name]

    def repository_url(self, index: int) -> str:
        self._check_open()
        try:
            return self._repositories[index]
        except IndexError:
            raise ConfigError(f"仓库槽位 {index} 未配置") from None

    @property
    def repository_count(self) -> int:
        self._check_open()
        return len(self._repositories)

    def installed_package(self, name: str) -> Package | None:
        """返回已安装的包版本，未安装或版本不在索引中时返回 None"""
        self._check_open()
        version = self._installed.get(name)
        record = self._names.get(name)
        if version is None or record is None:
            return None
        for pkg in record.packages:
            if pkg.version == version:
                return pkg
        return None


def _parse_package(name: str, entry: Any, repo_count: int) -> Package:
    if not isinstance(entry, dict):
        raise ConfigError(f"包 '{name}' 的版本条目格式错误: {entry!r}")

    version = entry.get("version")
    if not isinstance(version, str):
        raise ConfigError(f"包 '{name}' 的版本号必须为字符串: {version!r}")
    if not is_valid_version(version):
        raise ConfigError(f"包 '{name}' 的版本号非法: '{version}'")

    size = entry.get("size")
    if not isinstance(size, int) or isinstance(size, bool) or size < 0:
        raise ConfigError(f"包 '{name}-{version}' 的大小非法: {size!r}")

    repos = entry.get("repos") or []
    for idx in repos:
        if not isinstance(idx, int) or not 0 <= idx < repo_count:
            raise ConfigError(
                f"包 '{name}-{version}' 引用了未配置的仓库槽位: {idx!r}"
            )

    try:
        depends = tuple(parse_dependency(str(d)) for d in entry.get("depends") or [])
    except ValueError as e:
        raise ConfigError(f"包 '{name}-{version}' 的依赖声明非法: {e}") from e

    return Package(
        name=name,
        version=version,
        size=size,
        repos=RepositorySet.of(repos),
        depends=depends,
        description=str(entry.get("description", "")),
    )
