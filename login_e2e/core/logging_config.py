from __future__ import annotations

import logging
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"

_logging_lock = threading.Lock()


def setup_logging(level: str | int = "INFO", log_file: str | Path | None = None) -> None:
    """
    何回呼んでもハンドラは重複しない。
    log_file を渡したときだけローテーション付きでファイルにも出す。
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    with _logging_lock:
        root = logging.getLogger()
        root.setLevel(level)
        formatter = logging.Formatter(LOG_FORMAT)

        has_console = any(
            type(h) is logging.StreamHandler for h in root.handlers
        )
        if not has_console:
            console = logging.StreamHandler()
            console.setFormatter(formatter)
            root.addHandler(console)

        if log_file is not None:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            exists = any(
                isinstance(h, RotatingFileHandler) and h.baseFilename == str(path.absolute())
                for h in root.handlers
            )
            if not exists:
                fh = RotatingFileHandler(path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
                fh.setFormatter(formatter)
                root.addHandler(fh)

        # playwright 内部の asyncio ログはうるさいので抑える
        logging.getLogger("asyncio").setLevel(logging.WARNING)
