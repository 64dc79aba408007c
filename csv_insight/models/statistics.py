"""统计结果模型"""

import math
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from csv_insight.core.constants import STATISTIC_FIELDS
from csv_insight.utils.formatting import format_number, nan_to_none


class ColumnStatistics(BaseModel):
    """数值列描述统计（内部保持全精度）"""
    count: int = Field(0, ge=0, description="有效值数量")
    mean: float = Field(math.nan, description="均值")
    median: float = Field(math.nan, description="中位数（上中位数）")
    min: float = Field(math.nan, description="最小值")
    max: float = Field(math.nan, description="最大值")
    std_dev: float = Field(math.nan, description="总体标准差")
    q1: float = Field(math.nan, description="第一四分位数（截断下标）")
    q3: float = Field(math.nan, description="第三四分位数（截断下标）")

    @property
    def is_degenerate(self) -> bool:
        """没有任何有效值"""
        return self.count == 0

    def to_dict(self) -> Dict[str, Optional[float]]:
        """全精度数值，NaN 转为 None"""
        result: Dict[str, Optional[float]] = {}
        for name in STATISTIC_FIELDS:
            if name == "count":
                result[name] = self.count
            else:
                result[name] = nan_to_none(getattr(self, name))
        return result

    def formatted(self, decimals: int = 2) -> Dict[str, str]:
        """按展示精度格式化"""
        result = {}
        for name in STATISTIC_FIELDS:
            if name == "count":
                result[name] = str(self.count)
            else:
                result[name] = format_number(getattr(self, name), decimals)
        return result


class CorrelationMatrix(BaseModel):
    """Pearson 相关系数方阵（两轴均按数值列名索引）"""
    columns: List[str] = Field(default_factory=list, description="数值列名")
    values: Dict[str, Dict[str, float]] = Field(default_factory=dict, description="相关系数")

    def get(self, col_a: str, col_b: str) -> float:
        """获取 corr(col_a, col_b)"""
        return self.values[col_a][col_b]

    def to_dict(self) -> Dict[str, Dict[str, Optional[float]]]:
        """NaN 转为 None 的嵌套字典"""
        return {
            col_a: {col_b: nan_to_none(self.values[col_a][col_b]) for col_b in self.columns}
            for col_a in self.columns
        }

    def formatted(self, decimals: int = 2) -> List[Dict[str, Any]]:
        """按行展开为展示用表格，NaN 为空白"""
        rows = []
        for col_a in self.columns:
            rows.append({
                "column": col_a,
                "values": {
                    col_b: format_number(self.values[col_a][col_b], decimals)
                    for col_b in self.columns
                },
            })
        return rows
