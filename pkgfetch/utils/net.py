"""网络工具: 仓库地址分类与 URL 安全校验"""

from __future__ import annotations

from urllib.parse import urlparse

from pkgfetch.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))
_FILE_PREFIX = "file://"


def is_local_locator(locator: str) -> bool:
    """判断仓库地址是否指向本地文件系统

    不含 "://" 的普通路径，或 file:// 开头的地址，均视为本地。
    """
    return locator.startswith(_FILE_PREFIX) or "://" not in locator


def local_path(locator: str) -> str:
    """去掉 file:// 前缀，得到本地文件路径"""
    if locator.startswith(_FILE_PREFIX):
        return locator[len(_FILE_PREFIX):]
    return locator


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验远程 URL 仅使用 http/https，防止非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )
