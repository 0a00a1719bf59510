# envelope.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

import math
from dataclasses import dataclass

from shapely.geometry import box


@dataclass(frozen=True)
class Envelope:
    """轴对齐外包矩形，用作空间查询的窗口

    空矩形用 min > max 表示，见 Envelope.empty()
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def empty(cls):
        return cls(math.inf, math.inf, -math.inf, -math.inf)

    @classmethod
    def from_bounds(cls, bounds):
        """从 (min_x, min_y, max_x, max_y) 构造，与 shapely 的 bounds 顺序一致"""
        min_x, min_y, max_x, max_y = bounds
        return cls(float(min_x), float(min_y), float(max_x), float(max_y))

    @classmethod
    def from_ogr(cls, env):
        """从 OGR 的 GetEnvelope()/GetExtent() 结果构造 (min_x, max_x, min_y, max_y)"""
        min_x, max_x, min_y, max_y = env
        return cls(float(min_x), float(min_y), float(max_x), float(max_y))

    @classmethod
    def coerce(cls, value):
        if isinstance(value, cls):
            return value
        if hasattr(value, "bounds") and not isinstance(value, (tuple, list)):
            # shapely 几何
            if value.is_empty:
                return cls.empty()
            return cls.from_bounds(value.bounds)
        return cls.from_bounds(value)

    @property
    def is_null(self):
        return self.min_x > self.max_x or self.min_y > self.max_y

    @property
    def bounds(self):
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    @property
    def width(self):
        return 0.0 if self.is_null else self.max_x - self.min_x

    @property
    def height(self):
        return 0.0 if self.is_null else self.max_y - self.min_y

    @property
    def center(self):
        if self.is_null:
            return None
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def intersects(self, other):
        other = Envelope.coerce(other)
        if self.is_null or other.is_null:
            return False
        return not (other.min_x > self.max_x or other.max_x < self.min_x
                    or other.min_y > self.max_y or other.max_y < self.min_y)

    def contains(self, other):
        other = Envelope.coerce(other)
        if self.is_null or other.is_null:
            return False
        return (other.min_x >= self.min_x and other.max_x <= self.max_x
                and other.min_y >= self.min_y and other.max_y <= self.max_y)

    def expand_to_include(self, other):
        """返回同时包含两者的新矩形"""
        other = Envelope.coerce(other)
        if other.is_null:
            return self
        if self.is_null:
            return other
        return Envelope(min(self.min_x, other.min_x),
                        min(self.min_y, other.min_y),
                        max(self.max_x, other.max_x),
                        max(self.max_y, other.max_y))

    def to_geometry(self):
        if self.is_null:
            raise ValueError("空矩形无法转换为几何")
        return box(self.min_x, self.min_y, self.max_x, self.max_y)
