"""测试共享 fixture: 包索引构造 + 桩源流

整体结构:

  tmp_path/
  ├── root/etc/pkgfetch/index.yml   write_index() 写入
  ├── repo/                         本地仓库目录，add_artifact() 放入制品
  └── out/                          拉取目标目录

StubOpener 记录每次打开的地址，按地址返回预置的字节内容，
未预置的地址抛 OSError，用于验证 "从未打开源流" 类断言。
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pytest
import yaml

from pkgfetch.core.database import DEFAULT_INDEX_FILE


class StubOpener:
    """可注入 PackageFetcher 的桩源流打开器"""

    def __init__(self) -> None:
        self.payloads: dict[str, bytes] = {}
        self.calls: list[str] = []

    def __call__(self, locator: str, *, timeout: float = 60) -> io.BytesIO:
        self.calls.append(locator)
        if locator not in self.payloads:
            raise OSError(f"no such source: {locator}")
        return io.BytesIO(self.payloads[locator])


@pytest.fixture
def stub_opener() -> StubOpener:
    return StubOpener()


@pytest.fixture
def root_dir(tmp_path: Path) -> Path:
    root = tmp_path / "root"
    root.mkdir()
    return root


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    repo.mkdir()
    return repo


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def write_index(root_dir: Path):
    """写入 root 下的包索引，返回索引路径"""

    def _write(data: dict[str, Any]) -> Path:
        index = root_dir / DEFAULT_INDEX_FILE
        index.parent.mkdir(parents=True, exist_ok=True)
        index.write_text(yaml.dump(data, allow_unicode=True))
        return index

    return _write


@pytest.fixture
def add_artifact(repo_dir: Path):
    """在本地仓库中放入 <name>-<version>.apk，返回其路径"""

    def _add(name: str, version: str, content: bytes) -> Path:
        path = repo_dir / f"{name}-{version}.apk"
        path.write_bytes(content)
        return path

    return _add
