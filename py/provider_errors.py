# provider_errors.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#


class ProviderError(Exception):
    """数据源相关异常的基类"""


class FeatureNotFoundError(ProviderError, KeyError):
    """指定 ID 的要素不存在"""

    def __init__(self, oid, source=''):
        self.oid = oid
        self.source = source
        message = f"要素不存在: {oid}"
        if source:
            message += f" ({source})"
        super().__init__(message)

    def __str__(self):
        # KeyError 默认会给消息加引号
        return self.args[0]


class ProviderDisposedError(ProviderError, RuntimeError):
    """数据源已释放，不能再使用"""


class BackendError(ProviderError):
    """具体数据源的 I/O 或查询失败"""
