# memory_provider.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

import logging
import time

from rtree import index

from envelope import Envelope
from feature_data import FeatureDataSet, FeatureDataTable
from provider_base import BaseProvider
from provider_config import DEFAULT_SRID
from provider_errors import FeatureNotFoundError

logger = logging.getLogger(__name__)


class MemoryProvider(BaseProvider):
    """内存数据源，几何保存在要素表中，用 R 树索引做外包矩形过滤

    features 可以是 FeatureDataTable，也可以是几何列表（ID 为列表下标）。
    """

    def __init__(self, features, srid=DEFAULT_SRID, name="features"):
        super().__init__(srid)
        if isinstance(features, FeatureDataTable):
            source = features
        else:
            source = FeatureDataTable(name)
            for geom in features:
                source.add_row(source.new_row(geometry=geom))

        self._table = self.clone_table_structure(source)
        self._rows = {}
        for position, row in enumerate(source):
            oid = position if row.oid is None else int(row.oid)
            if oid in self._rows:
                raise ValueError(f"要素 ID 重复: {oid}")
            self._rows[oid] = self._table.import_row(row)
            self._rows[oid].oid = oid

        self.rtree_idx = None
        self.feature_bounds = {}  # 要素外包矩形
        self.build_index()

    @classmethod
    def from_provider(cls, provider):
        """把另一个数据源中带几何的要素复制到内存

        通过全图范围的外包矩形查询复制，没有几何（或几何为空）的要素
        不在任何范围内，不会被复制，数量不一致时记录警告。
        """
        ds = FeatureDataSet()
        extents = provider.get_extents()
        if extents.is_null:
            copy = cls([], srid=provider.srid)
        else:
            provider.execute_intersection_query(extents, ds)
            copy = cls(ds[0], srid=provider.srid)

        source_count = provider.get_feature_count()
        if copy.get_feature_count() != source_count:
            logger.warning("复制到内存的要素数 %d 与源数据 %d 不一致（无几何要素被跳过）",
                           copy.get_feature_count(), source_count)
        return copy

    def build_index(self):
        """构建或重建 R 树索引"""
        start_time = time.time()

        rtree_properties = index.Property()
        rtree_properties.dimension = 2
        self.rtree_idx = index.Index(properties=rtree_properties)

        self.feature_bounds = {}
        for oid, row in self._rows.items():
            geom = row.geometry
            if geom is None or geom.is_empty:
                continue
            self.feature_bounds[oid] = geom.bounds
            self.rtree_idx.insert(oid, geom.bounds)

        logger.info("R树索引构建完成! 耗时: %.2f秒, 条目: %d",
                    time.time() - start_time, len(self.feature_bounds))

    def _candidates(self, bbox):
        if bbox.is_null:
            return []
        return sorted(self.rtree_idx.intersection(bbox.bounds))

    def _copy_row(self, table, row):
        copied = table.import_row(row)
        if copied.geometry is not None:
            copied.geometry = self.factory.create_geometry(copied.geometry)
        return copied

    def _get_geometries_in_view(self, bbox):
        return [
            self.factory.create_geometry(self._rows[oid].geometry)
            for oid in self._candidates(bbox)
        ]

    def _get_object_ids_in_view(self, bbox):
        return self._candidates(bbox)

    def _get_geometry_by_id(self, oid):
        row = self._rows.get(oid)
        if row is None:
            raise FeatureNotFoundError(oid, self._table.name)
        if row.geometry is None:
            return None
        return self.factory.create_geometry(row.geometry)

    def _get_feature_count(self):
        return len(self._rows)

    def _get_feature(self, oid):
        row = self._rows.get(oid)
        if row is None:
            raise FeatureNotFoundError(oid, self._table.name)
        return self._copy_row(self.clone_table_structure(self._table), row)

    def _get_extents(self):
        extents = Envelope.empty()
        for bounds in self.feature_bounds.values():
            extents = extents.expand_to_include(Envelope.from_bounds(bounds))
        return extents

    def _execute_envelope_query(self, box, ds):
        table = self.clone_table_structure(self._table)
        for oid in self._candidates(box):
            self._copy_row(table, self._rows[oid])
        ds.add_table(table)

    def _on_execute_intersection_query(self, geom, ds):
        table = self.clone_table_structure(self._table)
        for oid in self._candidates(Envelope.coerce(geom)):
            row = self._rows[oid]
            if row.geometry.intersects(geom):
                self._copy_row(table, row)
        ds.add_table(table)
