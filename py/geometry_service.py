# geometry_service.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

import logging

import shapely
from shapely.geometry import LineString, Point, Polygon

from envelope import Envelope

logger = logging.getLogger(__name__)


class GeometryFactory:
    """绑定到某个 SRID 的几何构造器，产出的几何都带有该 SRID"""

    def __init__(self, srid=0):
        self._srid = int(srid)

    @property
    def srid(self):
        return self._srid

    def __repr__(self):
        return f"GeometryFactory(srid={self._srid})"

    def create_geometry(self, geometry):
        """复制一个几何并标记为本工厂的 SRID"""
        return shapely.set_srid(geometry, self._srid)

    def create_point(self, x, y):
        return self.create_geometry(Point(x, y))

    def create_line_string(self, coords):
        return self.create_geometry(LineString(coords))

    def create_polygon(self, shell, holes=None):
        return self.create_geometry(Polygon(shell, holes))

    def to_geometry(self, envelope):
        return self.create_geometry(Envelope.coerce(envelope).to_geometry())

    def from_wkt(self, wkt):
        return self.create_geometry(shapely.from_wkt(wkt))

    def from_wkb(self, wkb):
        return self.create_geometry(shapely.from_wkb(bytes(wkb)))


class GeometryServices:
    """默认几何服务，每个 SRID 只创建一个工厂"""

    def __init__(self):
        self._factories = {}

    def create_geometry_factory(self, srid):
        factory = self._factories.get(srid)
        if factory is None:
            logger.debug("创建几何工厂 SRID=%s", srid)
            factory = GeometryFactory(srid)
            self._factories[srid] = factory
        return factory


class GeometryServiceProvider:
    """进程级几何服务入口"""

    _instance = None

    @classmethod
    def instance(cls):
        if cls._instance is None:
            cls._instance = GeometryServices()
        return cls._instance

    @classmethod
    def set_instance(cls, service):
        """替换全局几何服务，传入 None 恢复默认实现"""
        cls._instance = service
