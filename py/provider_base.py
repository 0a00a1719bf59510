# provider_base.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

import logging
from abc import ABC, abstractmethod

from disposable import DisposableObject
from envelope import Envelope
from feature_data import FeatureDataColumn, FeatureDataTable
from geometry_service import GeometryServiceProvider
from provider_config import DEFAULT_SRID

logger = logging.getLogger(__name__)


class BaseProvider(DisposableObject, ABC):
    """空间数据源抽象基类

    负责 SRID 与几何工厂的绑定、打开/关闭状态以及交集查询的模板流程，
    具体的存储访问由子类实现 ``_`` 开头的抽象方法。

    基类不检查 is_open：关闭状态下的查询是否允许由子类决定，
    本项目自带的数据源在需要句柄时会自行调用 open()。

    同一实例不支持并发调用（包括修改 srid），需要由调用方加锁。
    """

    def __init__(self, srid=DEFAULT_SRID):
        super().__init__()
        # 用于连接池，空字符串表示不适用
        self.connection_id = ""
        self._srid = int(srid)
        self._is_open = False
        self._srid_changed_listeners = []
        self._factory = self._create_factory()

    def _create_factory(self, srid=None):
        service = GeometryServiceProvider.instance()
        return service.create_geometry_factory(
            self._srid if srid is None else srid)

    def _release_managed_resources(self):
        if self.is_open:
            self.close()
        self._factory = None
        self._srid_changed_listeners = []
        super()._release_managed_resources()

    # ---------------------------------------------------------------
    # 坐标系
    # ---------------------------------------------------------------

    @property
    def srid(self):
        return self._srid

    @srid.setter
    def srid(self, value):
        self._check_disposed()
        value = int(value)
        if value != self._srid:
            # 工厂创建失败时保持原 SRID 和原工厂
            factory = self._create_factory(value)
            self._srid = value
            self._factory = factory
            self._on_srid_changed()

    @property
    def factory(self):
        """与当前 SRID 一致的几何工厂"""
        self._check_disposed()
        return self._factory

    def add_srid_changed_listener(self, listener):
        """注册 SRID 变化回调，回调参数为数据源本身"""
        self._check_disposed()
        self._srid_changed_listeners.append(listener)

    def remove_srid_changed_listener(self, listener):
        self._check_disposed()
        self._srid_changed_listeners.remove(listener)

    def _on_srid_changed(self):
        # 工厂已重建，回调中读取 factory 已是新的
        logger.debug("%s SRID 变更为 %s", type(self).__name__, self._srid)
        for listener in list(self._srid_changed_listeners):
            listener(self)

    # ---------------------------------------------------------------
    # 打开 / 关闭
    # ---------------------------------------------------------------

    @property
    def is_open(self):
        return self._is_open

    def open(self):
        """打开数据源，子类获取资源后应调用 super().open()"""
        self._check_disposed()
        self._is_open = True

    def close(self):
        """关闭数据源，子类释放资源后应调用 super().close()"""
        self._is_open = False

    # ---------------------------------------------------------------
    # 查询
    # ---------------------------------------------------------------

    def get_geometries_in_view(self, bbox):
        """返回外包矩形与 bbox 相交的所有几何"""
        self._check_disposed()
        return self._get_geometries_in_view(Envelope.coerce(bbox))

    def get_object_ids_in_view(self, bbox):
        """返回外包矩形与 bbox 相交的要素 ID

        只做外包矩形（或空间索引）判断，比 get_geometries_in_view 快
        """
        self._check_disposed()
        return self._get_object_ids_in_view(Envelope.coerce(bbox))

    def get_geometry_by_id(self, oid):
        self._check_disposed()
        return self._get_geometry_by_id(oid)

    def get_feature_count(self):
        self._check_disposed()
        return self._get_feature_count()

    def get_feature(self, oid):
        self._check_disposed()
        return self._get_feature(oid)

    def get_extents(self):
        """整个数据集的外包矩形"""
        self._check_disposed()
        return self._get_extents()

    def execute_intersection_query(self, geom, ds):
        """把与 geom 相交的要素写入数据集 ds

        geom 为 Envelope（或 bbox 元组）时只按外包矩形过滤，且不触发
        begin/end 钩子。
        """
        self._check_disposed()
        if isinstance(geom, (Envelope, tuple, list)):
            self._execute_envelope_query(Envelope.coerce(geom), ds)
            return

        self._on_begin_execute_intersection_query(geom)
        try:
            self._on_execute_intersection_query(geom, ds)
        finally:
            self._on_end_execute_intersection_query()

    def _on_begin_execute_intersection_query(self, geom):
        pass

    @abstractmethod
    def _on_execute_intersection_query(self, geom, ds):
        pass

    def _on_end_execute_intersection_query(self):
        pass

    @abstractmethod
    def _execute_envelope_query(self, box, ds):
        pass

    @abstractmethod
    def _get_geometries_in_view(self, bbox):
        pass

    @abstractmethod
    def _get_object_ids_in_view(self, bbox):
        pass

    @abstractmethod
    def _get_geometry_by_id(self, oid):
        pass

    @abstractmethod
    def _get_feature_count(self):
        pass

    @abstractmethod
    def _get_feature(self, oid):
        pass

    @abstractmethod
    def _get_extents(self):
        pass

    @staticmethod
    def clone_table_structure(base_table):
        """复制表结构（列名、类型、表达式、映射方式），不复制约束和数据

        可空、自增等列属性不复制
        """
        result = FeatureDataTable(base_table.name)
        for column in base_table.columns:
            result.add_column(
                FeatureDataColumn(column.name, column.data_type,
                                  column.expression, column.mapping))
        return result
