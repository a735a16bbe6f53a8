"""字节流工具: 按地址打开源流并拷贝到目标

地址对调用方不透明：本地路径 / file:// 直接打开文件，
http/https 经 urllib 打开远程响应。两者都满足 ByteStream 协议。
"""

from __future__ import annotations

import logging
import urllib.request
from typing import BinaryIO

from pkgfetch.core.protocols import ByteStream
from pkgfetch.utils.net import is_local_locator, local_path, validate_url_scheme

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def open_stream(locator: str, *, timeout: float = 60) -> ByteStream:
    """按地址打开可读字节流

    Raises:
        OSError: 本地文件无法打开，或远程请求失败（URLError 是 OSError 子类）
        ValidationError: 远程地址协议不在白名单内
    """
    if is_local_locator(locator):
        return open(local_path(locator), "rb")
    validate_url_scheme(locator, context="package fetch")
    logger.debug("打开远程流: %s", locator)
    return urllib.request.urlopen(locator, timeout=timeout)  # nosec B310


def splice(stream: ByteStream, sink: BinaryIO, max_bytes: int) -> int:
    """从源流拷贝至多 max_bytes 字节到 sink，返回实际拷贝的字节数

    源流提前结束时返回已拷贝的字节数，由调用方比对期望大小。
    """
    copied = 0
    while copied < max_bytes:
        chunk = stream.read(min(CHUNK_SIZE, max_bytes - copied))
        if not chunk:
            break
        sink.write(chunk)
        copied += len(chunk)
    sink.flush()
    return copied
