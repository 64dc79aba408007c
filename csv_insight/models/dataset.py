"""数据集相关模型"""

import math
from enum import Enum
from typing import Annotated, Dict, List, Optional, Any, Literal, Union
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, model_validator

from csv_insight.utils.formatting import number_text


class NumericCell(BaseModel):
    """数值单元格"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["numeric"] = "numeric"
    value: float = Field(..., allow_inf_nan=False, description="数值")

    def as_text(self) -> str:
        return number_text(self.value)

    @property
    def is_blank(self) -> bool:
        return False


class TextCell(BaseModel):
    """文本单元格（空白字符串表示缺失值）"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    value: str = Field("", description="文本")

    def as_text(self) -> str:
        return self.value

    @property
    def is_blank(self) -> bool:
        return not self.value.strip()


Cell = Annotated[Union[NumericCell, TextCell], Field(discriminator="kind")]
Row = Dict[str, Cell]


class ColumnKind(str, Enum):
    """列类型"""
    NUMERIC = "numeric"
    TEXTUAL = "textual"


class Dataset(BaseModel):
    """
    已解析的矩形数据集

    所有行共享同一组有序列名；每一行对每个列名恰好有一个值。
    """
    model_config = ConfigDict(frozen=True)

    columns: List[str] = Field(..., description="列名（表头顺序）")
    rows: List[Row] = Field(default_factory=list, description="数据行")

    @model_validator(mode="after")
    def check_rectangular(self) -> "Dataset":
        if len(set(self.columns)) != len(self.columns):
            raise ValueError(f"列名重复: {self.columns}")
        header = set(self.columns)
        for index, row in enumerate(self.rows):
            if set(row.keys()) != header:
                raise ValueError(f"第 {index + 1} 行的列与表头不一致")
        return self

    @classmethod
    def from_records(cls, records: List[Dict[str, Any]], columns: Optional[List[str]] = None) -> "Dataset":
        """由 Python 原生值构建数据集（数字 → NumericCell，其余 → TextCell）"""
        if columns is None:
            columns = list(records[0].keys()) if records else []
        rows = [
            {col: make_cell(record[col]) for col in columns}
            for record in records
        ]
        return cls(columns=columns, rows=rows)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def make_cell(value: Any) -> Union[NumericCell, TextCell]:
    """将原生值包装为带标签的单元格"""
    if isinstance(value, (NumericCell, TextCell)):
        return value
    if isinstance(value, bool) or value is None:
        return TextCell(value="" if value is None else str(value).lower())
    if isinstance(value, float) and not math.isfinite(value):
        return TextCell(value="")
    if isinstance(value, (int, float)):
        return NumericCell(value=float(value))
    return TextCell(value=str(value))


class ColumnSchema(BaseModel):
    """列 Schema"""
    name: str = Field(..., description="列名")
    kind: ColumnKind = Field(..., description="列类型: numeric, textual")
    blank_ratio: float = Field(0.0, ge=0.0, le=1.0, description="空白值比例")
    example_values: List[Any] = Field(default_factory=list, description="示例值")
    unique_count: Optional[int] = Field(None, description="唯一值数量")


class DatasetMetadata(BaseModel):
    """数据集元数据"""
    dataset_id: str = Field(..., description="数据集唯一标识")
    original_filename: str = Field(..., description="原始文件名")
    row_count: int = Field(..., ge=0, description="总行数")
    column_count: int = Field(..., ge=0, description="总列数")
    columns_schema: List[ColumnSchema] = Field(default_factory=list, description="列 Schema")
    created_at: datetime = Field(default_factory=datetime.now, description="创建时间")
    size_bytes: int = Field(0, ge=0, description="文件大小（字节）")
