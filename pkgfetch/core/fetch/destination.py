"""目标路径策略

路径规则:
  <outdir>/<name>-<version>.<ext>

已存在同名文件且大小与声明大小一致时视为已拉取（只比较元数据，不做内容校验）。
"""

from __future__ import annotations

import os
from pathlib import Path

from pkgfetch.core.exceptions import DestinationCreateError
from pkgfetch.core.fetch.models import FetchOptions
from pkgfetch.core.models import Package


def _check_component(value: str, package: Package) -> None:
    if not value or value in (".", "..") or "/" in value or (os.altsep and os.altsep in value):
        raise DestinationCreateError(package.id, f"非法的文件名组成部分 '{value}'")


def output_path(options: FetchOptions, package: Package) -> Path:
    """计算包的输出文件路径

    Raises:
        DestinationCreateError: 包名或版本号无法构成合法文件名
    """
    _check_component(package.name, package)
    _check_component(package.version, package)
    return Path(options.outdir or ".") / package.artifact_name(options.extension)


def already_fetched(path: Path, package: Package) -> bool:
    """目标已存在且大小等于声明大小（不跟随符号链接）"""
    try:
        st = path.lstat()
    except OSError:
        return False
    return st.st_size == package.size
