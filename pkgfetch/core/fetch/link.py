"""本地硬链接快路径

源地址位于本地文件系统时，先经一层符号链接解析得到真实路径，
再将其硬链接到目标路径，省去整包拷贝。任何失败都静默回退到流式拉取。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pkgfetch.core.fetch.models import LinkResult
from pkgfetch.utils.net import is_local_locator, local_path

logger = logging.getLogger(__name__)


def try_hardlink(source: str, destination: Path) -> LinkResult:
    """尝试以硬链接完成拉取

    返回:
        NOT_APPLICABLE: 源地址不是本地路径
        FAILED: 源不是符号链接，或链接创建失败（跨设备、权限、目标已存在）
        LINKED: 硬链接已创建，本次拉取完成
    """
    if not is_local_locator(source):
        return LinkResult.NOT_APPLICABLE

    src = local_path(source)
    try:
        target = os.readlink(src)
    except OSError as e:
        logger.debug("硬链接不可用，%s 不是符号链接: %s", src, e)
        return LinkResult.FAILED

    # 相对链接以链接所在目录为基准
    real_path = os.path.join(os.path.dirname(src), target)
    try:
        os.link(real_path, destination)
    except OSError as e:
        logger.debug("硬链接失败 %s -> %s: %s", real_path, destination, e)
        return LinkResult.FAILED

    logger.debug("已硬链接 %s -> %s", real_path, destination)
    return LinkResult.LINKED
