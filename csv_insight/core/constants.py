"""系统常量定义"""

from typing import Set

# 支持的文件类型
SUPPORTED_FILE_EXTENSIONS: Set[str] = {".csv"}

# 查询动作白名单
QUERY_ACTIONS: Set[str] = {
    "set_search", "toggle_sort", "toggle_column",
    "toggle_all_columns", "set_page", "next_page", "previous_page"
}

# 统计量字段（展示顺序）
STATISTIC_FIELDS = (
    "mean", "median", "std_dev", "q1", "q3", "min", "max", "count"
)

# 四分位截断下标比例
Q1_FRACTION = 0.25
Q3_FRACTION = 0.75

# 导出文件名前缀
EXPORT_FILENAME_PREFIX = "processed_"

# 最大限制
MAX_EXAMPLE_VALUES = 3
