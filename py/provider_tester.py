# provider_tester.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

import logging
import time

from envelope import Envelope

logger = logging.getLogger(__name__)


class ProviderTester:

    def __init__(self, bbox):
        self.bbox = Envelope.coerce(bbox)

    def run_performance_test(self, providers):
        """对每个数据源执行同一个 bbox 查询，返回 {名称: (耗时ms, 结果数)}"""
        logger.info("===== 性能测试开始 =====")

        report = {}
        for name, provider in providers.items():
            logger.info("[测试] %s:", name)
            start_time = time.time()
            results = provider.get_object_ids_in_view(self.bbox)
            duration = (time.time() - start_time) * 1000
            logger.info("总耗时: %.2fms, 结果数: %d", duration, len(results))
            report[name] = (duration, len(results))

        logger.info("===== 性能测试结束 =====")
        return report
