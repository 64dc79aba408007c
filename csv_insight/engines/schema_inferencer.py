"""Schema Inferencer - 列类型推断（数值 / 文本）"""

import re
from typing import Dict, List, Optional, Union

from csv_insight.models.dataset import ColumnKind, Dataset, NumericCell, TextCell

# 十进制 ASCII 数字：可选符号、可选小数点、可选科学计数法；不接受千分位、nan、inf
_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_number(text: str) -> Optional[float]:
    """
    解析十进制数字

    Args:
        text: 原始文本（会去除首尾空白）

    Returns:
        解析出的数值；空白或非数字返回 None
    """
    stripped = text.strip()
    if not _NUMBER_PATTERN.fullmatch(stripped):
        return None
    value = float(stripped)
    # 超出浮点范围（如 1e999）视为非数字
    if value in (float("inf"), float("-inf")):
        return None
    return value


def cell_number(cell: Union[NumericCell, TextCell]) -> Optional[float]:
    """单元格的数值；空白或非数字返回 None"""
    if isinstance(cell, NumericCell):
        return cell.value
    if cell.is_blank:
        return None
    return parse_number(cell.value)


def classify_column(dataset: Dataset, column: str) -> ColumnKind:
    """任一非空且不可解析为数字的值都会使整列成为文本列"""
    for row in dataset.rows:
        cell = row[column]
        if cell.is_blank:
            continue
        if cell_number(cell) is None:
            return ColumnKind.TEXTUAL
    return ColumnKind.NUMERIC


def infer_schema(dataset: Dataset) -> Dict[str, ColumnKind]:
    """
    推断每列的类型

    Args:
        dataset: 数据集（至少一行）

    Returns:
        列名 → 类型，按表头顺序
    """
    return {column: classify_column(dataset, column) for column in dataset.columns}


def numeric_columns(schema: Dict[str, ColumnKind], header: Optional[List[str]] = None) -> List[str]:
    """按表头顺序列出数值列"""
    names = header if header is not None else list(schema.keys())
    return [name for name in names if schema.get(name) == ColumnKind.NUMERIC]
