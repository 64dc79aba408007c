"""展示格式化工具"""

import math
from typing import Optional


def format_number(value: Optional[float], decimals: int = 2) -> str:
    """保留固定小数位；NaN 渲染为空白，而不是 0"""
    if value is None or math.isnan(value):
        return ""
    return f"{value:.{decimals}f}"


def number_text(value: float) -> str:
    """数值的最短文本形式（整数值不带 .0）"""
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def nan_to_none(value: Optional[float]) -> Optional[float]:
    """NaN → None（JSON 中为 null）"""
    if value is None or math.isnan(value):
        return None
    return value
