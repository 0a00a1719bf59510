# query_timing.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

import logging
import time

logger = logging.getLogger(__name__)


class QueryTimingMixin:
    """通过交集查询的 begin/end 钩子统计耗时

    用法: class TimedProvider(QueryTimingMixin, MemoryProvider)
    """

    last_query_ms = None
    query_count = 0

    def _on_begin_execute_intersection_query(self, geom):
        super()._on_begin_execute_intersection_query(geom)
        self._query_started = time.perf_counter()

    def _on_end_execute_intersection_query(self):
        duration = (time.perf_counter() - self._query_started) * 1000
        self.last_query_ms = duration
        self.query_count += 1
        logger.info("%s 交集查询完成! 耗时: %.2fms", type(self).__name__, duration)
        super()._on_end_execute_intersection_query()
