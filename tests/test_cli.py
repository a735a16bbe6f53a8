"""命令行测试 - fetch / list 子命令与退出状态"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

import pkgfetch.core.config as cfgmod
from pkgfetch.cli import main
from pkgfetch.utils.logger import reset_logging


@pytest.fixture(autouse=True)
def _reset_state():
    cfgmod._current = None
    yield
    cfgmod._current = None
    reset_logging()


@pytest.fixture
def index_root(root_dir: Path, repo_dir: Path, write_index, add_artifact) -> Path:
    write_index({
        "repositories": [str(repo_dir)],
        "packages": {
            "app": [
                {"version": "1.0", "size": 5, "repos": [0], "depends": ["lib"]},
                {"version": "2.0", "size": 5, "repos": [0], "depends": ["lib"]},
            ],
            "lib": [{"version": "1.0", "size": 3, "repos": [0]}],
            "orphan": [{"version": "1.0", "size": 3, "repos": []}],
        },
    })
    add_artifact("app", "2.0", b"app-2")
    add_artifact("lib", "1.0", b"lib")
    return root_dir


def _invoke(tmp_path: Path, root: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(main, [
        "--config", str(tmp_path / "none.yml"), "--root", str(root), *args,
    ])


class TestFetchCommand:
    def test_fetch_latest(self, tmp_path: Path, index_root: Path, out_dir: Path) -> None:
        result = _invoke(tmp_path, index_root, "fetch", "-o", str(out_dir), "app")
        assert result.exit_code == 0, result.output
        assert (out_dir / "app-2.0.apk").read_bytes() == b"app-2"
        assert not (out_dir / "lib-1.0.apk").exists()
        assert "app-2.0" in result.output

    def test_fetch_recursive(self, tmp_path: Path, index_root: Path, out_dir: Path) -> None:
        result = _invoke(tmp_path, index_root, "fetch", "-R", "-o", str(out_dir), "app")
        assert result.exit_code == 0, result.output
        assert (out_dir / "lib-1.0.apk").exists()
        assert (out_dir / "app-2.0.apk").exists()

    def test_fetch_stdout(self, tmp_path: Path, index_root: Path) -> None:
        result = CliRunner().invoke(main, [
            "--config", str(tmp_path / "none.yml"), "--root", str(index_root),
            "-q", "fetch", "--stdout", "lib",
        ])
        assert result.exit_code == 0
        assert result.stdout_bytes == b"lib"

    def test_simulate(self, tmp_path: Path, index_root: Path, out_dir: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [
            "--config", str(tmp_path / "none.yml"), "--root", str(index_root),
            "--simulate", "fetch", "-o", str(out_dir), "app",
        ])
        assert result.exit_code == 0, result.output
        assert list(out_dir.iterdir()) == []

    @pytest.mark.parametrize(("name", "message"), [
        ("ghost", "未知的包名"),
        ("orphan", "不在任何仓库中"),
    ])
    def test_failure_exit_status(
        self, tmp_path: Path, index_root: Path, out_dir: Path, name: str, message: str,
    ) -> None:
        result = _invoke(tmp_path, index_root, "fetch", "-o", str(out_dir), name)
        assert result.exit_code == 1
        assert message in result.output

    def test_requires_package_argument(self, tmp_path: Path, index_root: Path) -> None:
        result = _invoke(tmp_path, index_root, "fetch")
        assert result.exit_code != 0


class TestConfigFile:
    def test_extension_from_config(self, tmp_path: Path, index_root: Path, out_dir: Path, repo_dir: Path) -> None:
        (repo_dir / "lib-1.0.pkg").write_bytes(b"lib")
        cfg = tmp_path / "pkgfetch.yml"
        cfg.write_text(yaml.dump({"artifact_ext": "pkg", "root": str(index_root)}))

        result = CliRunner().invoke(main, ["--config", str(cfg), "fetch", "-o", str(out_dir), "lib"])
        assert result.exit_code == 0, result.output
        assert (out_dir / "lib-1.0.pkg").read_bytes() == b"lib"

    def test_invalid_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "pkgfetch.yml"
        cfg.write_text(yaml.dump({"max_repos": 0}))
        result = CliRunner().invoke(main, ["--config", str(cfg), "list"])
        assert result.exit_code == 1
        assert "max_repos" in result.output

    def test_malformed_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "pkgfetch.yml"
        cfg.write_text("root: [unclosed\n")
        result = CliRunner().invoke(main, ["--config", str(cfg), "list"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "配置文件无法读取" in result.output


class TestListCommand:
    def test_list(self, tmp_path: Path, index_root: Path, repo_dir: Path) -> None:
        result = _invoke(tmp_path, index_root, "list")
        assert result.exit_code == 0, result.output
        assert "app" in result.output and "2.0" in result.output
        assert str(index_root / "etc/pkgfetch/index.yml") in result.output
        assert str(repo_dir) in result.output

    def test_list_missing_index(self, tmp_path: Path, root_dir: Path) -> None:
        result = _invoke(tmp_path, root_dir, "list")
        assert result.exit_code == 1
        assert "包索引不存在" in result.output

    def test_list_malformed_index(self, tmp_path: Path, root_dir: Path, write_index) -> None:
        write_index({}).write_text("repositories: [unclosed\n")
        result = _invoke(tmp_path, root_dir, "list")
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "包索引无法读取" in result.output
