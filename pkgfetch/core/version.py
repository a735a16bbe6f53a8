"""包版本比较

版本格式:
    N(.N)*[字母](_后缀[N])*[-rN]

    例: 1.2.3, 1.0a, 2.1_rc2, 1.31.1-r3, 5.0_p20240101

后缀顺序:
    alpha < beta < pre < rc < (无后缀) < cvs < svn < git < hg < p

比较规则:
  - 数字段逐段按整数比较，段数多者更大（1.0 < 1.0.1）
  - 字母后缀: 无字母 < a < b ...
  - 下划线后缀按上表排序，同类后缀再比数字
  - 最后比较 -rN 修订号（缺省为 0）
"""

from __future__ import annotations

import enum
import re
from functools import lru_cache

_VERSION_RE = re.compile(
    r"^(?P<nums>\d+(?:\.\d+)*)"
    r"(?P<letter>[a-z]?)"
    r"(?P<suffixes>(?:_(?:alpha|beta|pre|rc|cvs|svn|git|hg|p)\d*)*)"
    r"(?:-r(?P<rev>\d+))?$"
)
_SUFFIX_RE = re.compile(r"_(alpha|beta|pre|rc|cvs|svn|git|hg|p)(\d*)")

# 预发布后缀为负，发布后补丁类后缀为正，0 表示 "后缀结束"
_SUFFIX_RANK = {
    "alpha": -4, "beta": -3, "pre": -2, "rc": -1,
    "cvs": 1, "svn": 2, "git": 3, "hg": 4, "p": 5,
}


class VersionResult(enum.Enum):
    """版本比较结果"""

    LESS = "<"
    EQUAL = "="
    GREATER = ">"


class VersionMask(enum.IntFlag):
    """依赖约束掩码: 允许的比较结果集合"""

    LESS = 1
    EQUAL = 2
    GREATER = 4
    REQUIRE = LESS | EQUAL | GREATER


_MASK_OPERATORS = {
    "=": VersionMask.EQUAL,
    "<": VersionMask.LESS,
    ">": VersionMask.GREATER,
    "<=": VersionMask.LESS | VersionMask.EQUAL,
    ">=": VersionMask.GREATER | VersionMask.EQUAL,
}

_RESULT_MASK = {
    VersionResult.LESS: VersionMask.LESS,
    VersionResult.EQUAL: VersionMask.EQUAL,
    VersionResult.GREATER: VersionMask.GREATER,
}


def is_valid_version(version: str) -> bool:
    return _VERSION_RE.match(version) is not None


@lru_cache(maxsize=4096)
def _version_key(version: str) -> tuple:
    m = _VERSION_RE.match(version)
    if m is None:
        raise ValueError(f"非法版本号: '{version}'")
    nums = tuple(int(n) for n in m.group("nums").split("."))
    letter = m.group("letter")
    suffixes = [
        (_SUFFIX_RANK[name], int(num or 0))
        for name, num in _SUFFIX_RE.findall(m.group("suffixes"))
    ]
    suffixes.append((0, 0))
    rev = int(m.group("rev") or 0)
    return nums, letter, tuple(suffixes), rev


def compare_versions(a: str, b: str) -> VersionResult:
    """比较两个版本号，返回 a 相对 b 的结果

    Raises:
        ValueError: 任一版本号格式非法
    """
    ka, kb = _version_key(a), _version_key(b)
    if ka < kb:
        return VersionResult.LESS
    if ka > kb:
        return VersionResult.GREATER
    return VersionResult.EQUAL


def version_matches(version: str, mask: VersionMask, target: str = "") -> bool:
    """判断 version 与 target 的比较结果是否落在 mask 内

    mask 为 REQUIRE 时任何版本都满足，无需 target。
    """
    if mask == VersionMask.REQUIRE:
        return True
    return bool(_RESULT_MASK[compare_versions(version, target)] & mask)


def mask_from_operator(op: str) -> VersionMask:
    """依赖表达式中的比较运算符转换为约束掩码"""
    try:
        return _MASK_OPERATORS[op]
    except KeyError:
        raise ValueError(f"不支持的版本运算符: '{op}'") from None


def mask_to_operator(mask: VersionMask) -> str:
    for op, m in _MASK_OPERATORS.items():
        if m == mask:
            return op
    return ""
