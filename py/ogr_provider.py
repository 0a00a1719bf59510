# ogr_provider.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

import logging
import time

import shapely
from osgeo import ogr

from envelope import Envelope
from feature_data import FeatureDataTable
from provider_base import BaseProvider
from provider_errors import BackendError, FeatureNotFoundError

logger = logging.getLogger(__name__)

ogr.UseExceptions()

# OGR 字段类型 -> Python 类型
FIELD_TYPES = {
    ogr.OFTInteger: int,
    ogr.OFTInteger64: int,
    ogr.OFTReal: float,
    ogr.OFTString: str,
    ogr.OFTDate: str,
    ogr.OFTTime: str,
    ogr.OFTDateTime: str,
}


class OgrProvider(BaseProvider):
    """基于 GDAL/OGR 的文件数据源（Shapefile、GeoJSON、GeoPackage 等）

    未指定 srid 时，首次打开会从图层的空间参考中识别 EPSG 代码。
    """

    def __init__(self, data_path, layer=0, srid=None):
        super().__init__(0 if srid is None else srid)
        self.data_path = data_path
        self.connection_id = str(data_path)
        self.layer_ref = layer
        self._detect_srid = srid is None
        self._datasource = None
        self._layer = None
        self._schema = None

        ogr.RegisterAll()

    def open(self):
        if self.is_open:
            return
        self._check_disposed()
        try:
            datasource = ogr.Open(str(self.data_path))
        except RuntimeError as e:
            raise BackendError(f"无法打开数据源: {self.data_path}") from e
        if datasource is None:
            raise BackendError(f"无法打开数据源: {self.data_path}")
        try:
            layer = datasource.GetLayer(self.layer_ref)
        except RuntimeError as e:
            raise BackendError(f"图层不存在: {self.layer_ref}") from e
        if layer is None:
            raise BackendError(f"图层不存在: {self.layer_ref}")

        self._datasource = datasource
        self._layer = layer
        self._schema = self._build_schema(layer)
        super().open()
        logger.info("打开数据源 %s, 图层 %s, 共 %d 个要素", self.data_path,
                    layer.GetName(), layer.GetFeatureCount())

        if self._detect_srid:
            self._detect_srid = False
            code = self._layer_epsg(layer)
            if code is not None:
                self.srid = code

    def close(self):
        self._layer = None
        self._datasource = None
        super().close()

    @staticmethod
    def _layer_epsg(layer):
        srs = layer.GetSpatialRef()
        if srs is None:
            return None
        code = srs.GetAuthorityCode(None)
        if code and code.isdigit():
            return int(code)
        return None

    @staticmethod
    def _build_schema(layer):
        defn = layer.GetLayerDefn()
        table = FeatureDataTable(layer.GetName())
        for i in range(defn.GetFieldCount()):
            field = defn.GetFieldDefn(i)
            table.add_column(field.GetName(),
                             FIELD_TYPES.get(field.GetType(), object))
        return table

    def _get_layer(self):
        # 未打开时按需打开
        if not self.is_open:
            self.open()
        return self._layer

    def _iter_features(self, filter_geom=None, bbox=None):
        layer = self._get_layer()
        if bbox is not None:
            layer.SetSpatialFilterRect(bbox.min_x, bbox.min_y, bbox.max_x,
                                       bbox.max_y)
        elif filter_geom is not None:
            layer.SetSpatialFilter(
                ogr.CreateGeometryFromWkb(shapely.to_wkb(filter_geom)))
        layer.ResetReading()
        try:
            for feature in layer:
                yield feature
        finally:
            layer.SetSpatialFilter(None)
            layer.ResetReading()

    def _to_geometry(self, feature):
        geom = feature.GetGeometryRef()
        if geom is None:
            return None
        return self.factory.from_wkb(geom.ExportToWkb())

    def _to_row(self, table, feature, geom=None):
        values = {
            column.name: feature.GetField(column.name)
            for column in table.columns
        }
        if geom is None:
            geom = self._to_geometry(feature)
        return table.add_row(table.new_row(values, geom, feature.GetFID()))

    def _get_geometries_in_view(self, bbox):
        if bbox.is_null:
            return []
        start_time = time.time()
        results = []
        for feature in self._iter_features(bbox=bbox):
            geom = self._to_geometry(feature)
            if geom is not None:
                results.append(geom)
        logger.debug("查询完成! 耗时: %.2fms, 结果数: %d",
                     (time.time() - start_time) * 1000, len(results))
        return results

    def _get_object_ids_in_view(self, bbox):
        if bbox.is_null:
            return []
        return [feature.GetFID() for feature in self._iter_features(bbox=bbox)]

    def _fetch(self, oid):
        layer = self._get_layer()
        try:
            feature = layer.GetFeature(oid)
        except RuntimeError:
            feature = None
        if feature is None:
            raise FeatureNotFoundError(oid, str(self.data_path))
        return feature

    def _get_geometry_by_id(self, oid):
        return self._to_geometry(self._fetch(oid))

    def _get_feature_count(self):
        return self._get_layer().GetFeatureCount()

    def _get_feature(self, oid):
        feature = self._fetch(oid)
        return self._to_row(self.clone_table_structure(self._get_schema()),
                            feature)

    def _get_extents(self):
        layer = self._get_layer()
        if layer.GetFeatureCount() == 0:
            return Envelope.empty()
        try:
            extent = layer.GetExtent()
        except RuntimeError as e:
            # 所有要素都没有几何时 OGR 无法计算范围
            logger.warning("无法计算图层范围 %s: %s", self.data_path, e)
            return Envelope.empty()
        return Envelope.from_ogr(extent)

    def _execute_envelope_query(self, box, ds):
        table = self.clone_table_structure(self._get_schema())
        if not box.is_null:
            for feature in self._iter_features(bbox=box):
                self._to_row(table, feature)
        ds.add_table(table)

    def _on_execute_intersection_query(self, geom, ds):
        table = self.clone_table_structure(self._get_schema())
        for feature in self._iter_features(filter_geom=geom):
            row_geom = self._to_geometry(feature)
            # 部分驱动的空间过滤只比较外包矩形，这里再做精确判断
            if row_geom is None or not row_geom.intersects(geom):
                continue
            self._to_row(table, feature, row_geom)
        ds.add_table(table)

    def _get_schema(self):
        self._get_layer()
        return self._schema
