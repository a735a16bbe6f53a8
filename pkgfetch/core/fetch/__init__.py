"""包拉取模块

拆分说明:
- models.py: 拉取配置与结果模型
- locator.py: 仓库定位
- link.py: 本地硬链接快路径
- destination.py: 目标路径与幂等跳过
- fetcher.py: 单包流式拉取
- orchestrator.py: 按包名编排（非递归 / 递归依赖闭包）
"""

from pkgfetch.core.fetch.fetcher import PackageFetcher
from pkgfetch.core.fetch.models import FetchOptions, FetchResult, FetchStatus, LinkResult
from pkgfetch.core.fetch.orchestrator import FetchOrchestrator, fetch_packages

__all__ = [
    "FetchOptions",
    "FetchResult",
    "FetchStatus",
    "LinkResult",
    "PackageFetcher",
    "FetchOrchestrator",
    "fetch_packages",
]
