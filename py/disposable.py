# disposable.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

from provider_errors import ProviderDisposedError


class DisposableObject:
    """可释放对象，释放后任何操作都会抛出 ProviderDisposedError"""

    def __init__(self):
        self._disposed = False

    @property
    def is_disposed(self):
        return self._disposed

    def dispose(self):
        if self._disposed:
            return
        try:
            self._release_managed_resources()
        finally:
            self._disposed = True

    def _release_managed_resources(self):
        pass

    def _check_disposed(self):
        if self._disposed:
            raise ProviderDisposedError(f"{type(self).__name__} 已释放")

    def __enter__(self):
        self._check_disposed()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.dispose()
