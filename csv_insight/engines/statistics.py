"""Descriptive Statistics Calculator - 描述统计"""

import math
from typing import Dict, List

from csv_insight.core.constants import Q1_FRACTION, Q3_FRACTION
from csv_insight.engines.schema_inferencer import cell_number
from csv_insight.models.dataset import Dataset
from csv_insight.models.statistics import ColumnStatistics
from csv_insight.utils.numeric import scale_by_power_of_two


def column_values(dataset: Dataset, column: str) -> List[float]:
    """按行顺序收集列中的有效数值（跳过空白）"""
    values = []
    for row in dataset.rows:
        value = cell_number(row[column])
        if value is not None:
            values.append(value)
    return values


def _truncating_index(count: int, fraction: float) -> int:
    return math.floor(count * fraction)


def describe(values: List[float]) -> ColumnStatistics:
    """
    计算单列描述统计

    中位数与四分位数均取升序副本中 floor(count * p) 处的元素（偶数个
    时为上中位数，不做插值）；标准差为总体标准差（除以 count）。

    Args:
        values: 有效数值（行顺序）

    Returns:
        ColumnStatistics；无有效值时除 count 外全为 NaN
    """
    count = len(values)
    if count == 0:
        return ColumnStatistics(count=0)

    ordered = sorted(values)
    if ordered[0] == ordered[-1]:
        # 常数列：避免浮点舍入产生非零标准差
        mean, std_dev = ordered[0], 0.0
    else:
        scaled, exponent = scale_by_power_of_two(values)
        scaled_mean = math.fsum(scaled) / count
        scaled_variance = math.fsum((value - scaled_mean) ** 2 for value in scaled) / count
        mean = math.ldexp(scaled_mean, exponent)
        std_dev = math.ldexp(math.sqrt(scaled_variance), exponent)

    return ColumnStatistics(
        count=count,
        mean=mean,
        median=ordered[_truncating_index(count, 0.5)],
        min=ordered[0],
        max=ordered[-1],
        std_dev=std_dev,
        q1=ordered[_truncating_index(count, Q1_FRACTION)],
        q3=ordered[_truncating_index(count, Q3_FRACTION)],
    )


def compute_statistics(dataset: Dataset, numeric_columns: List[str]) -> Dict[str, ColumnStatistics]:
    """
    计算所有数值列的描述统计

    Args:
        dataset: 数据集
        numeric_columns: 数值列名（结果保持该顺序）

    Returns:
        列名 → ColumnStatistics
    """
    return {
        column: describe(column_values(dataset, column))
        for column in numeric_columns
    }
