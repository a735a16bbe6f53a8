"""CLI: 包拉取与查询命令"""

from __future__ import annotations

from typing import Any

import click

from pkgfetch.core.database import OpenFlags, PackageDatabase
from pkgfetch.core.exceptions import PkgFetchError
from pkgfetch.core.fetch import FetchOptions, FetchStatus, fetch_packages

_STATUS_LABEL = {
    FetchStatus.DOWNLOADED: "已下载",
    FetchStatus.LINKED: "已链接",
    FetchStatus.SKIPPED: "已存在",
    FetchStatus.SIMULATED: "模拟",
}


def register(group: click.Group) -> None:
    group.add_command(fetch)
    group.add_command(list_packages)


@click.command()
@click.argument("packages", nargs=-1, required=True, metavar="PACKAGE...")
@click.option("--recursive", "-R", is_flag=True, help="拉取 PACKAGE 及其全部依赖")
@click.option(
    "--stdout", "-s", "to_stdout", is_flag=True,
    help="将包内容输出到标准输出（与 -o、-R 不兼容）",
)
@click.option("--link", "-L", is_flag=True, help="尽可能创建硬链接")
@click.option("--output", "-o", default=".", metavar="DIR", help="放置 PACKAGE 的目录")
@click.pass_obj
def fetch(
    obj: dict[str, Any], packages: tuple[str, ...], recursive: bool,
    to_stdout: bool, link: bool, output: str,
) -> None:
    """从仓库下载 PACKAGE 到本地目录，可据此建立本地镜像仓库"""
    cfg = obj["config"]
    options = FetchOptions(
        recursive=recursive,
        stdout=to_stdout,
        link=link,
        outdir=output,
        simulate=obj["simulate"],
        extension=cfg.artifact_ext,
        max_repos=cfg.max_repos,
        timeout=cfg.fetch_timeout,
    )
    try:
        results = fetch_packages(
            packages, options,
            stdout=click.get_binary_stream("stdout") if to_stdout else None,
        )
    except PkgFetchError as e:
        raise click.ClickException(str(e)) from e

    # stdout 已被包内容占用
    if to_stdout:
        return
    for r in results:
        click.echo(f"{_STATUS_LABEL[r.status]}: {r.package.id} -> {r.destination}")


@click.command(name="list")
@click.pass_obj
def list_packages(obj: dict[str, Any]) -> None:
    """列出包数据库中的全部包名、版本及所在仓库"""
    cfg = obj["config"]
    try:
        with PackageDatabase.open(
            cfg.root, OpenFlags.NO_STATE,
            index_file=cfg.index_file, max_repos=cfg.max_repos,
        ) as db:
            click.echo(f"{cfg.index_path()}:")
            for record in db.iter_names():
                if not record.packages:
                    click.echo(f"  {record.name:20s} (无可用版本)")
                    continue
                for pkg in record.packages:
                    repos = ", ".join(db.repository_url(i) for i in pkg.repos) or "-"
                    click.echo(
                        f"  {pkg.name:20s} {pkg.version:14s} {pkg.size:>10d}  {repos}"
                    )
    except PkgFetchError as e:
        raise click.ClickException(str(e)) from e
