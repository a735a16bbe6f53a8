"""依赖解析器: 为一个根依赖锁定完整的依赖闭包

职责:
- 解析依赖表达式（name、name>=1.2 等）
- 为每个包名选择满足约束的最高版本
- 按 "依赖先于被依赖者" 的顺序输出变更列表

用法:
    with ResolverSession(db) as session:
        session.lock(Dependency("busybox"))
        for change in session.changes:
            print(change.new_package.id)
"""

from __future__ import annotations

import logging
import re

from pkgfetch.core.exceptions import UnresolvableDependencyError
from pkgfetch.core.models import Change, Dependency, Package, latest_package
from pkgfetch.core.protocols import PackageDatabaseProtocol
from pkgfetch.core.version import VersionMask, is_valid_version, mask_from_operator

logger = logging.getLogger(__name__)

_DEP_RE = re.compile(
    r"^(?P<name>[^<>=\s]+)\s*(?:(?P<op><=|>=|=|<|>)\s*(?P<version>\S+))?$"
)


def parse_dependency(text: str) -> Dependency:
    """解析依赖表达式

    Raises:
        ValueError: 表达式或其中的版本号格式非法
    """
    m = _DEP_RE.match(text.strip())
    if m is None:
        raise ValueError(f"非法依赖表达式: '{text}'")
    op, version = m.group("op"), m.group("version")
    if op is None:
        return Dependency(name=m.group("name"))
    if not is_valid_version(version):
        raise ValueError(f"依赖 '{text}' 中的版本号非法: '{version}'")
    return Dependency(name=m.group("name"), mask=mask_from_operator(op), version=version)


class ResolverSession:
    """依赖解析会话

    同一会话内每个包名只锁定一次，后续约束必须与已锁定版本相容。
    循环依赖在锁定时自然终止（包名在递归前已登记）。
    """

    def __init__(self, db: PackageDatabaseProtocol) -> None:
        self.db = db
        self.changes: list[Change] = []
        self._locked: dict[str, Package] = {}

    def __enter__(self) -> ResolverSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def lock(self, dependency: Dependency) -> None:
        """锁定 dependency 的依赖闭包，失败时会话状态保持不变

        Raises:
            UnresolvableDependencyError: 以根依赖名报告失败
        """
        changes_before = list(self.changes)
        locked_before = dict(self._locked)
        try:
            self._lock(dependency)
        except UnresolvableDependencyError as e:
            self.changes = changes_before
            self._locked = locked_before
            if e.name == dependency.name:
                raise
            raise UnresolvableDependencyError(
                dependency.name, f"{e.name}: {e.reason}",
            ) from e
        logger.debug(
            "已锁定 %s: %d 个变更", dependency,
            len(self.changes) - len(changes_before),
        )

    def _lock(self, dep: Dependency) -> None:
        locked = self._locked.get(dep.name)
        if locked is not None:
            if not dep.satisfied_by(locked):
                raise UnresolvableDependencyError(
                    dep.name, f"已锁定 {locked.id}，与约束 {dep} 冲突",
                )
            return

        record = self.db.lookup_name(dep.name)
        if record is None or not record.packages:
            raise UnresolvableDependencyError(dep.name, "没有可用的包版本")

        best = latest_package(p for p in record.packages if dep.satisfied_by(p))
        if best is None:
            raise UnresolvableDependencyError(dep.name, f"没有满足 {dep} 的版本")

        self._locked[dep.name] = best
        for sub in best.depends:
            self._lock(sub)

        old = self.db.installed_package(dep.name)
        if old is None or old.version != best.version:
            self.changes.append(Change(new_package=best, old_package=old))

    def release(self) -> None:
        self.changes = []
        self._locked = {}


def require(name: str) -> Dependency:
    """构造 "任意版本" 约束的依赖"""
    return Dependency(name=name, mask=VersionMask.REQUIRE)
