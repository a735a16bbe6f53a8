"""仓库定位: 在包的仓库归属集合中选出第一个已配置仓库"""

from __future__ import annotations

from pkgfetch.core.exceptions import NoRepositoryFoundError
from pkgfetch.core.models import Package


def locate_repository(package: Package, max_repos: int) -> int:
    """按槽位升序返回第一个承载该包的仓库下标

    Raises:
        NoRepositoryFoundError: 归属集合为空，或没有落在已配置槽位内的仓库
    """
    for index in range(max_repos):
        if index in package.repos:
            return index
    raise NoRepositoryFoundError(package.id)
