"""pkgfetch - 软件包制品拉取工具"""

__version__ = "0.3.0"
