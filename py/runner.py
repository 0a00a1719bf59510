# runner.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

import argparse
from typing import Dict

from memory_provider import MemoryProvider
from ogr_provider import OgrProvider
from provider_base import BaseProvider
from provider_config import configure_logging
from provider_tester import ProviderTester


def build_parser():
    parser = argparse.ArgumentParser(
        description="比较不同数据源的 bbox 查询性能（需要 GDAL: pip install .[gdal]）")
    parser.add_argument("data_path", help="OGR 可读取的矢量数据")
    parser.add_argument("--bbox",
                        nargs=4,
                        type=float,
                        metavar=("MIN_X", "MIN_Y", "MAX_X", "MAX_Y"),
                        help="查询范围，默认使用数据全图范围")
    parser.add_argument("--layer", default=0, help="图层序号或名称")
    parser.add_argument("--srid", type=int, default=None)
    return parser


def parse_args(argv=None):
    return build_parser().parse_args(argv)


def main(argv=None):
    configure_logging()
    args = parse_args(argv)
    layer = int(args.layer) if str(args.layer).isdigit() else args.layer

    with OgrProvider(args.data_path, layer=layer, srid=args.srid) as ogr_provider:
        memory_provider = MemoryProvider.from_provider(ogr_provider)
        bbox = args.bbox or ogr_provider.get_extents()

        providers: Dict[str, BaseProvider] = {
            "OGR": ogr_provider,
            "Memory": memory_provider,
        }
        tester = ProviderTester(bbox)
        report = tester.run_performance_test(providers)
        memory_provider.dispose()
    return report


if __name__ == "__main__":
    main()
