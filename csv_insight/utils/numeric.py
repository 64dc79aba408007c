"""数值计算工具"""

import math
from typing import List, Tuple


def scale_by_power_of_two(values: List[float]) -> Tuple[List[float], int]:
    """
    按 2 的幂缩放，使最大绝对值落在 [0.5, 1)

    缩放只改变指数位，对有限浮点数是精确的（极小值相对最大值可能下溢为 0）。
    在缩放后的数值上求均值与离差平方和，可避免极大值的平方溢出为 inf、
    极小值的平方下溢为 0。

    Args:
        values: 有限数值

    Returns:
        (缩放后的数值, 指数)；原值 = math.ldexp(缩放值, 指数)
    """
    if not values:
        return [], 0
    _, exponent = math.frexp(max(abs(value) for value in values))
    return [math.ldexp(value, -exponent) for value in values], exponent
