"""拉取编排器

对命令行给出的每个包名依次处理:

  非递归: 在该名称的全部版本中选出最高版本，拉取这一个包
  递归:   调用依赖解析器锁定依赖闭包，按变更顺序逐个拉取

任何一个失败都终止整次运行，后续包名不再处理，也不做重试。
数据库在整次运行中只打开一次，无论成功失败都会关闭。

用法:
    from pkgfetch.core.fetch import FetchOptions, fetch_packages

    results = fetch_packages(["busybox"], FetchOptions(recursive=True), root="/")
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import BinaryIO

from pkgfetch.core.config import get_config
from pkgfetch.core.database import OpenFlags, PackageDatabase
from pkgfetch.core.exceptions import NameNotFoundError, NoVariantsAvailableError
from pkgfetch.core.fetch.fetcher import PackageFetcher
from pkgfetch.core.fetch.models import FetchOptions, FetchResult
from pkgfetch.core.models import latest_package
from pkgfetch.core.protocols import (
    PackageDatabaseProtocol,
    ResolverSessionProtocol,
    StreamOpener,
)
from pkgfetch.core.resolver import ResolverSession, require
from pkgfetch.utils.stream import open_stream

logger = logging.getLogger(__name__)

ResolverFactory = Callable[[PackageDatabaseProtocol], ResolverSessionProtocol]


class FetchOrchestrator:
    """按包名逐个解析并拉取"""

    def __init__(
        self,
        db: PackageDatabaseProtocol,
        options: FetchOptions,
        *,
        fetcher: PackageFetcher | None = None,
        resolver_factory: ResolverFactory = ResolverSession,
    ) -> None:
        self.db = db
        self.options = options
        self.fetcher = fetcher or PackageFetcher(db, options)
        self.resolver_factory = resolver_factory

    def run(self, names: Iterable[str]) -> list[FetchResult]:
        """依次处理每个包名，返回全部拉取结果；首个失败直接抛出"""
        results: list[FetchResult] = []
        for name in names:
            if self.options.recursive:
                results.extend(self._fetch_closure(name))
            else:
                results.append(self._fetch_latest(name))
        return results

    def _fetch_closure(self, name: str) -> list[FetchResult]:
        if self.db.lookup_name(name) is None:
            raise NameNotFoundError(name)

        session = self.resolver_factory(self.db)
        try:
            session.lock(require(name))
            packages = [change.new_package for change in session.changes]
        finally:
            session.release()

        logger.debug("%s: 依赖闭包共 %d 个包", name, len(packages))
        return [self.fetcher.fetch(pkg) for pkg in packages]

    def _fetch_latest(self, name: str) -> FetchResult:
        record = self.db.lookup_name(name)
        if record is None:
            raise NameNotFoundError(name)

        pkg = latest_package(record.packages)
        if pkg is None:
            raise NoVariantsAvailableError(name)
        return self.fetcher.fetch(pkg)


def fetch_packages(
    names: Iterable[str],
    options: FetchOptions,
    *,
    root: str | Path | None = None,
    index_file: str | None = None,
    opener: StreamOpener = open_stream,
    stdout: BinaryIO | None = None,
) -> list[FetchResult]:
    """打开数据库、拉取全部包名并关闭数据库

    root、index_file 未提供时取自当前全局配置。

    Raises:
        PkgFetchError 子类: 首个失败（数据库已关闭）
    """
    cfg = get_config()
    with PackageDatabase.open(
        cfg.root if root is None else root, OpenFlags.NO_STATE,
        index_file=cfg.index_file if index_file is None else index_file,
        max_repos=options.max_repos,
    ) as db:
        fetcher = PackageFetcher(db, options, opener=opener, stdout=stdout)
        return FetchOrchestrator(db, options, fetcher=fetcher).run(names)
