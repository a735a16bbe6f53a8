"""领域协议定义

集中定义拉取核心与外部协作者之间的接口契约（Protocol），
拉取核心只依赖这些抽象，测试时可注入桩实现。

使用 typing.Protocol 而非 ABC，使得现有类无需修改继承关系即可满足协议。
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pkgfetch.core.models import Change, Dependency, NameRecord, Package


# =========================================================================
# 字节流协议
# =========================================================================

class ByteStream(Protocol):
    """可读字节流: 本地文件对象与 urllib 响应均满足"""

    def read(self, size: int = -1, /) -> bytes:
        ...

    def close(self) -> None:
        ...


class StreamOpener(Protocol):
    """按地址打开字节流的可调用对象"""

    def __call__(self, locator: str, *, timeout: float = 60) -> ByteStream:
        ...


# =========================================================================
# 包数据库协议
# =========================================================================

class PackageDatabaseProtocol(Protocol):
    """包数据库协议: 名称查询 + 仓库地址查询"""

    def lookup_name(self, name: str) -> NameRecord | None:
        """按名称查询，未知名称返回 None"""
        ...

    def repository_url(self, index: int) -> str:
        """按仓库槽位返回仓库基础地址"""
        ...

    def installed_package(self, name: str) -> Package | None:
        """返回已安装的包版本，未安装时返回 None"""
        ...

    def close(self) -> None:
        ...


# =========================================================================
# 依赖解析协议
# =========================================================================

class ResolverSessionProtocol(Protocol):
    """依赖解析会话协议: lock 成功后 changes 为有序的待安装变更"""

    changes: Sequence[Change]

    def lock(self, dependency: Dependency) -> None:
        """锁定依赖闭包，失败抛 UnresolvableDependencyError"""
        ...

    def release(self) -> None:
        ...
