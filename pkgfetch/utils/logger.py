"""pkgfetch 日志配置

日志一律写 stderr，stdout 留给 `fetch --stdout` 的包数据。
PKGFETCH_LOG_JSON=1 时输出单行 JSON，便于流水线采集。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TextIO

_TEXT_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
_LEVELS = frozenset(("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"))


class JSONFormatter(logging.Formatter):
    """单行 JSON 格式器: ts / level / logger / msg，异常时附带 exc"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(
    level: str = "INFO", json_output: bool = False, stream: TextIO | None = None,
) -> None:
    """重新配置根日志器，只保留一个输出 handler

    level 不识别时按 INFO 处理。
    """
    reset_logging()
    root = logging.getLogger()
    name = level.upper()
    root.setLevel(name if name in _LEVELS else "INFO")

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(_TEXT_FORMAT))
    root.addHandler(handler)


def reset_logging() -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

