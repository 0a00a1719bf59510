# provider_config.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

import logging
import os
import sys

# 未指定坐标系时使用的 SRID
DEFAULT_SRID = int(os.getenv("SPATIAL_PROVIDER_DEFAULT_SRID", "0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class _PlainFormatter(logging.Formatter):

    def format(self, record):
        parts = [
            self.formatTime(record, datefmt="%H:%M:%S"),
            record.levelname[0],
            record.name + ":",
            record.getMessage(),
        ]
        if record.exc_info:
            parts.append(self.formatException(record.exc_info))
        return " ".join(parts)


def configure_logging(level=None):
    """配置根日志（重复调用无副作用）"""
    if getattr(configure_logging, "_configured", False):
        return
    root = logging.getLogger()
    root.setLevel((level or LOG_LEVEL).upper())
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_PlainFormatter())
    root.addHandler(handler)
    configure_logging._configured = True
