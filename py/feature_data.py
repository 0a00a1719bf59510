# feature_data.py
# created by:
#   @author: vlv-squid
#   @date: 2026-10-18
#

from enum import Enum


class ColumnMapping(Enum):
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    SIMPLE_CONTENT = "simple_content"
    HIDDEN = "hidden"


class FeatureDataColumn:

    def __init__(self,
                 name,
                 data_type=object,
                 expression=None,
                 mapping=ColumnMapping.ELEMENT,
                 allow_null=True,
                 auto_increment=False):
        self.name = name
        self.data_type = data_type
        # 计算列表达式，只保存不求值
        self.expression = expression
        self.mapping = mapping
        self.allow_null = allow_null
        self.auto_increment = auto_increment

    def __repr__(self):
        type_name = getattr(self.data_type, "__name__", self.data_type)
        return f"FeatureDataColumn({self.name!r}, {type_name})"


class UniqueConstraint:

    def __init__(self, column_names, primary_key=False):
        self.column_names = tuple(column_names)
        self.primary_key = primary_key

    def key(self, row):
        return tuple(row[name] for name in self.column_names)


class FeatureDataRow:
    """要素行：几何 + 属性值，属于唯一一张表"""

    def __init__(self, table, values=None, geometry=None, oid=None):
        self.table = table
        self.geometry = geometry
        self.oid = oid
        self._values = {column.name: None for column in table.columns}
        for name, value in (values or {}).items():
            self[name] = value

    def __getitem__(self, name):
        if name not in self._values:
            raise KeyError(f"表 {self.table.name!r} 中没有列 {name!r}")
        return self._values[name]

    def __setitem__(self, name, value):
        if name not in self._values:
            raise KeyError(f"表 {self.table.name!r} 中没有列 {name!r}")
        self._values[name] = value

    def __repr__(self):
        return f"FeatureDataRow(oid={self.oid!r}, values={self._values!r})"

    @property
    def values(self):
        return dict(self._values)

    @property
    def item_array(self):
        """按列顺序返回属性值"""
        return [self._values[column.name] for column in self.table.columns]


class FeatureDataTable:

    def __init__(self, name="", columns=None):
        self.name = name
        self.columns = []
        self.constraints = []
        self.rows = []
        for column in columns or []:
            self.add_column(column)

    def __len__(self):
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def __repr__(self):
        return (f"FeatureDataTable({self.name!r}, columns={self.column_names}, "
                f"rows={len(self.rows)})")

    @property
    def column_names(self):
        return [column.name for column in self.columns]

    def add_column(self, column, data_type=object, **kwargs):
        """添加列，可传入 FeatureDataColumn 或列名"""
        if not isinstance(column, FeatureDataColumn):
            column = FeatureDataColumn(column, data_type, **kwargs)
        if column.name in self.column_names:
            raise ValueError(f"列已存在: {column.name}")
        if self.rows:
            raise ValueError("表中已有数据，不能再添加列")
        self.columns.append(column)
        return column

    def get_column(self, name):
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(f"表 {self.name!r} 中没有列 {name!r}")

    def add_unique_constraint(self, column_names, primary_key=False):
        for name in column_names:
            self.get_column(name)
        constraint = UniqueConstraint(column_names, primary_key)
        self.constraints.append(constraint)
        return constraint

    def new_row(self, values=None, geometry=None, oid=None):
        """创建符合本表结构的新行（不加入表中）"""
        return FeatureDataRow(self, values, geometry, oid)

    def add_row(self, row):
        if row.table is not self:
            raise ValueError("该行不属于此表")
        for constraint in self.constraints:
            key = constraint.key(row)
            if any(constraint.key(other) == key for other in self.rows):
                raise ValueError(
                    f"违反唯一约束 {constraint.column_names}: {key}")
        self.rows.append(row)
        return row

    def import_row(self, row):
        """把其他表的行按列名复制进本表"""
        values = {
            name: value
            for name, value in row.values.items() if name in self.column_names
        }
        return self.add_row(self.new_row(values, row.geometry, row.oid))

    def clear(self):
        self.rows.clear()


class FeatureDataSet:
    """要素表的有序集合，交集查询的结果容器"""

    def __init__(self, name=""):
        self.name = name
        self.tables = []

    def __len__(self):
        return len(self.tables)

    def __iter__(self):
        return iter(self.tables)

    def __getitem__(self, key):
        if isinstance(key, str):
            for table in self.tables:
                if table.name == key:
                    return table
            raise KeyError(f"数据集中没有表 {key!r}")
        return self.tables[key]

    def add_table(self, table):
        self.tables.append(table)
        return table
