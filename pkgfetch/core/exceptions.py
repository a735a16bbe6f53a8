"""统一异常体系

所有业务异常继承 PkgFetchError，替代散落的 ValueError / OSError。
CLI 层据此输出友好提示并以非零状态退出。

拉取流程中的任何一个异常都会终止整次调用，不做重试，也不存在
"部分包成功即整体成功" 的模式。
"""

from __future__ import annotations


class PkgFetchError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(PkgFetchError):
    """配置文件或包索引缺失、内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(PkgFetchError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class NameNotFoundError(PkgFetchError):
    """包名在数据库中不存在"""

    code = "NAME_NOT_FOUND"

    def __init__(self, name: str) -> None:
        super().__init__(f"未知的包名: '{name}'")
        self.name = name


class NoVariantsAvailableError(PkgFetchError):
    """包名已知，但没有任何可用版本"""

    code = "NO_VARIANTS"

    def __init__(self, name: str) -> None:
        super().__init__(f"无法获取 '{name}': 没有可用的包版本")
        self.name = name


class UnresolvableDependencyError(PkgFetchError):
    """依赖解析器无法锁定依赖闭包"""

    code = "UNRESOLVABLE"

    def __init__(self, name: str, reason: str = "") -> None:
        detail = f" ({reason})" if reason else ""
        super().__init__(f"无法安装 '{name}'{detail}")
        self.name = name
        self.reason = reason


class NoRepositoryFoundError(PkgFetchError):
    """包不在任何已配置的仓库中"""

    code = "NO_REPOSITORY"

    def __init__(self, package_id: str) -> None:
        super().__init__(f"{package_id}: 不在任何仓库中")
        self.package_id = package_id


class DownloadIncompleteError(PkgFetchError):
    """源流打开失败，或实际传输字节数与声明大小不一致"""

    code = "DOWNLOAD_INCOMPLETE"

    def __init__(
        self, locator: str, *, expected: int = 0, actual: int | None = None,
        reason: str = "",
    ) -> None:
        if actual is not None:
            detail = f": 期望 {expected} 字节, 实际 {actual} 字节"
        elif reason:
            detail = f": {reason}"
        else:
            detail = ""
        super().__init__(f"无法下载 '{locator}'{detail}")
        self.locator = locator
        self.expected = expected
        self.actual = actual


class DestinationCreateError(PkgFetchError):
    """无法创建输出文件（权限不足、目录不存在、非法文件名）"""

    code = "DESTINATION_CREATE_FAILED"

    def __init__(self, path: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"{path}{detail}")
        self.path = path
