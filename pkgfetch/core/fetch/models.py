"""拉取数据模型

数据类:
- FetchOptions: 一次运行的拉取配置（不可变）
- FetchResult: 单个包的拉取结果
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path

from pkgfetch.core.models import Package

DEFAULT_EXTENSION = "apk"
DEFAULT_MAX_REPOS = 8


@dataclass(frozen=True)
class FetchOptions:
    """拉取配置，由 CLI 参数与配置文件在入口处一次性构建"""

    recursive: bool = False
    stdout: bool = False
    link: bool = False
    outdir: str = "."
    simulate: bool = False
    extension: str = DEFAULT_EXTENSION
    max_repos: int = DEFAULT_MAX_REPOS
    timeout: float = 60


class FetchStatus(enum.Enum):
    """单个包的拉取结果状态"""

    DOWNLOADED = "downloaded"
    LINKED = "linked"
    SKIPPED = "skipped"      # 目标已存在且大小一致
    SIMULATED = "simulated"


class LinkResult(enum.Enum):
    """硬链接快路径结果: NOT_APPLICABLE 与 FAILED 都回退到完整拷贝"""

    NOT_APPLICABLE = "not_applicable"
    FAILED = "failed"
    LINKED = "linked"


@dataclass(frozen=True)
class FetchResult:
    package: Package
    status: FetchStatus
    destination: Path | None = None  # stdout 模式下为 None
