"""集中配置管理

提供统一的配置入口，支持从 YAML 文件加载 + 编程式覆盖。
CLI 参数（--root、-v 等）在入口处覆盖文件中的值。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from pkgfetch.core.exceptions import ConfigError
from pkgfetch.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "configs/pkgfetch.yml"


@dataclass
class Config:
    """全局配置"""

    # 包数据库
    root: str = "/"
    index_file: str = "etc/pkgfetch/index.yml"  # 相对 root
    max_repos: int = 8

    # 拉取
    artifact_ext: str = "apk"
    fetch_timeout: int = 60

    # 日志
    log_level: str = "INFO"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"配置文件无法读取: {path} - {e}") from e
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        cfg.validate()
        return cfg

    def validate(self) -> None:
        if not isinstance(self.max_repos, int) or self.max_repos <= 0:
            raise ConfigError(f"max_repos 必须为正整数: {self.max_repos!r}")
        if not self.artifact_ext or "/" in self.artifact_ext:
            raise ConfigError(f"非法的制品扩展名: {self.artifact_ext!r}")

    def index_path(self) -> Path:
        """包索引文件的绝对位置（index_file 为绝对路径时直接使用）"""
        return Path(self.root) / self.index_file


# 全局当前配置，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_FILE) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.debug("配置已加载: %s", path)
    return _current
