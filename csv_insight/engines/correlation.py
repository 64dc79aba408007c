"""Correlation Engine - Pearson 相关矩阵"""

import math
from typing import Dict, List, Tuple

from csv_insight.engines.schema_inferencer import cell_number
from csv_insight.models.dataset import Dataset
from csv_insight.models.statistics import CorrelationMatrix
from csv_insight.utils.numeric import scale_by_power_of_two


def _aligned_pairs(dataset: Dataset, col_a: str, col_b: str) -> Tuple[List[float], List[float]]:
    """成对完整观测：仅保留两列在同一行均有有效值的行"""
    xs: List[float] = []
    ys: List[float] = []
    for row in dataset.rows:
        x = cell_number(row[col_a])
        y = cell_number(row[col_b])
        if x is None or y is None:
            continue
        xs.append(x)
        ys.append(y)
    return xs, ys


def _sum_of_squares(values: List[float], mean: float) -> float:
    return math.fsum((value - mean) * (value - mean) for value in values)


def pearson(xs: List[float], ys: List[float]) -> float:
    """
    Pearson 相关系数

    Args:
        xs: 按行对齐的第一列数值
        ys: 按行对齐的第二列数值

    Returns:
        [-1, 1] 内的系数；无观测或任一方差为 0 时返回 NaN
    """
    if len(xs) != len(ys):
        raise ValueError(f"序列长度不一致: {len(xs)} != {len(ys)}")
    # 常数序列方差严格为 0，不经浮点运算判断
    if not xs or min(xs) == max(xs) or min(ys) == max(ys):
        return math.nan

    # 相关系数与尺度无关，各自缩放后计算
    xs, _ = scale_by_power_of_two(xs)
    ys, _ = scale_by_power_of_two(ys)
    mean_x = math.fsum(xs) / len(xs)
    mean_y = math.fsum(ys) / len(ys)
    variance_x = _sum_of_squares(xs, mean_x)
    variance_y = _sum_of_squares(ys, mean_y)
    if variance_x == 0 or variance_y == 0:
        return math.nan

    covariance = math.fsum((x - mean_x) * (y - mean_y) for x, y in zip(xs, ys))
    correlation = covariance / math.sqrt(variance_x * variance_y)
    # 截断浮点误差
    return max(-1.0, min(1.0, correlation))


def compute_correlations(dataset: Dataset, numeric_columns: List[str]) -> CorrelationMatrix:
    """
    计算数值列两两之间（含自身）的相关系数方阵

    每对列只计算一次，镜像填充另一半，保证矩阵严格对称。

    Args:
        dataset: 数据集
        numeric_columns: 数值列名（矩阵两轴的顺序）

    Returns:
        CorrelationMatrix
    """
    values: Dict[str, Dict[str, float]] = {col: {} for col in numeric_columns}
    for i, col_a in enumerate(numeric_columns):
        for col_b in numeric_columns[i:]:
            xs, ys = _aligned_pairs(dataset, col_a, col_b)
            coefficient = pearson(xs, ys)
            values[col_a][col_b] = coefficient
            values[col_b][col_a] = coefficient
    return CorrelationMatrix(columns=list(numeric_columns), values=values)
