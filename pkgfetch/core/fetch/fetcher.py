"""单包拉取器

职责:
- 目标已存在且大小一致时跳过（幂等）
- 定位承载该包的仓库
- 本地仓库 + 链接模式时尝试硬链接快路径
- 流式拷贝至多声明大小的字节，校验长度，失败时清理目标文件

流程:
  1. 计算目标路径，已拉取则直接返回 SKIPPED
  2. 定位仓库（失败抛 NoRepositoryFoundError）
  3. 模拟模式到此为止，返回 SIMULATED
  4. 硬链接快路径（仅 --link 且源为本地）
  5. 打开源流 → 创建目标 → 拷贝 → 校验
"""

from __future__ import annotations

import http.client
import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO

from pkgfetch.core.exceptions import (
    DestinationCreateError,
    DownloadIncompleteError,
    ValidationError,
)
from pkgfetch.core.fetch.destination import already_fetched, output_path
from pkgfetch.core.fetch.link import try_hardlink
from pkgfetch.core.fetch.locator import locate_repository
from pkgfetch.core.fetch.models import FetchOptions, FetchResult, FetchStatus, LinkResult
from pkgfetch.core.models import Package
from pkgfetch.core.protocols import ByteStream, PackageDatabaseProtocol, StreamOpener
from pkgfetch.utils.stream import open_stream, splice

logger = logging.getLogger(__name__)

_CREATE_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
_CREATE_MODE = 0o644

# 传输失败: 套接字错误与 HTTP 协议错误（IncompleteRead、InvalidURL 等）
_TRANSFER_ERRORS = (OSError, http.client.HTTPException)


class PackageFetcher:
    """单包拉取器

    opener 与 stdout 可注入，便于测试替换源流和标准输出。
    """

    def __init__(
        self,
        db: PackageDatabaseProtocol,
        options: FetchOptions,
        *,
        opener: StreamOpener = open_stream,
        stdout: BinaryIO | None = None,
    ) -> None:
        self.db = db
        self.options = options
        self.opener = opener
        self._stdout = stdout

    def fetch(self, package: Package) -> FetchResult:
        """拉取单个包

        Raises:
            NoRepositoryFoundError: 包不在任何已配置仓库中
            DestinationCreateError: 无法创建输出文件
            DownloadIncompleteError: 源流打开失败或传输长度不符
        """
        dest: Path | None = None
        if not self.options.stdout:
            dest = output_path(self.options, package)
            if already_fetched(dest, package):
                logger.debug("已存在，跳过: %s", dest)
                return FetchResult(package, FetchStatus.SKIPPED, dest)

        logger.info("下载 %s", package.id)

        repo = locate_repository(package, self.options.max_repos)
        if self.options.simulate:
            return FetchResult(package, FetchStatus.SIMULATED, dest)

        source = f"{self.db.repository_url(repo)}/{package.artifact_name(self.options.extension)}"

        if dest is not None and self.options.link:
            if try_hardlink(source, dest) is LinkResult.LINKED:
                return FetchResult(package, FetchStatus.LINKED, dest)

        stream = self._open(source, package)
        try:
            if dest is None:
                self._copy_to_stdout(stream, source, package)
            else:
                self._copy_to_file(stream, source, dest, package)
        finally:
            stream.close()
        return FetchResult(package, FetchStatus.DOWNLOADED, dest)

    # ------------------------------------------------------------------
    # 流式拷贝
    # ------------------------------------------------------------------

    def _open(self, source: str, package: Package) -> ByteStream:
        try:
            return self.opener(source, timeout=self.options.timeout)
        except (OSError, http.client.HTTPException, ValidationError) as e:
            raise DownloadIncompleteError(
                source, expected=package.size, reason=str(e),
            ) from e

    def _copy_to_stdout(self, stream: ByteStream, source: str, package: Package) -> None:
        sink = self._stdout if self._stdout is not None else sys.stdout.buffer
        try:
            copied = splice(stream, sink, package.size)
        except _TRANSFER_ERRORS as e:
            raise DownloadIncompleteError(
                source, expected=package.size, reason=str(e),
            ) from e
        if copied != package.size:
            raise DownloadIncompleteError(source, expected=package.size, actual=copied)

    def _copy_to_file(
        self, stream: ByteStream, source: str, dest: Path, package: Package,
    ) -> None:
        try:
            fd = os.open(dest, _CREATE_FLAGS, _CREATE_MODE)
        except OSError as e:
            raise DestinationCreateError(str(dest), e.strerror or str(e)) from e

        try:
            with os.fdopen(fd, "wb") as sink:
                copied = splice(stream, sink, package.size)
        except _TRANSFER_ERRORS as e:
            _remove_partial(dest)
            raise DownloadIncompleteError(
                source, expected=package.size, reason=str(e),
            ) from e

        if copied != package.size:
            _remove_partial(dest)
            raise DownloadIncompleteError(source, expected=package.size, actual=copied)


def _remove_partial(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("无法删除不完整的文件 %s: %s", path, e)
