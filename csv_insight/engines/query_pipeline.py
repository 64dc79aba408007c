"""Query Pipeline - 搜索过滤 → 排序 → 分页"""

import math
from typing import Any, List, Optional, Tuple

from csv_insight.core.config import settings
from csv_insight.models.dataset import Dataset, NumericCell, Row
from csv_insight.models.query import QueryPage, QueryState, SortSpec


def _validate_columns(dataset: Dataset, state: QueryState, visible_columns: List[str]) -> None:
    """校验查询引用的列均存在"""
    available_cols = set(dataset.columns)
    for col in visible_columns:
        if col not in available_cols:
            raise ValueError(f"可见列不存在: {col}")
    if state.sort is not None and state.sort.col not in available_cols:
        raise ValueError(f"排序列不存在: {state.sort.col}")


def filter_rows(rows: List[Row], search_term: str, visible_columns: List[str]) -> List[Row]:
    """
    保留在任一可见列中包含搜索词（忽略大小写）的行

    空搜索词不过滤；不可见列永远不参与匹配。
    """
    if not search_term:
        return list(rows)
    needle = search_term.casefold()
    return [
        row for row in rows
        if any(needle in row[col].as_text().casefold() for col in visible_columns)
    ]


def _sort_key(row: Row, column: str) -> Tuple[int, Any]:
    # 数值按数值比较，文本按字典序；混合列中数值排在文本之前
    cell = row[column]
    if isinstance(cell, NumericCell):
        return (0, cell.value)
    return (1, cell.value)


def sort_rows(rows: List[Row], sort: Optional[SortSpec]) -> List[Row]:
    """稳定排序；降序为升序比较的反向，相等行保持原相对顺序"""
    if sort is None:
        return list(rows)
    return sorted(
        rows,
        key=lambda row: _sort_key(row, sort.col),
        reverse=sort.dir == "desc"
    )


def total_pages_for(count: int, page_size: int) -> int:
    """总页数，至少为 1"""
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    return max(1, min(page, total_pages))


def paginate(rows: List[Row], page: int, page_size: int) -> Tuple[List[Row], int, int]:
    """
    取指定页（页码越界时截断到 [1, 总页数]）

    Returns:
        (当前页行, 实际页码, 总页数)
    """
    total_pages = total_pages_for(len(rows), page_size)
    page = clamp_page(page, total_pages)
    start = (page - 1) * page_size
    return rows[start:start + page_size], page, total_pages


def query_rows(dataset: Dataset, state: QueryState, visible_columns: Optional[List[str]] = None) -> QueryPage:
    """
    按 过滤 → 排序 → 分页 的顺序生成结果页

    Args:
        dataset: 数据集（不会被修改）
        state: 查询状态
        visible_columns: 可见列；默认取 state.visible_columns

    Returns:
        QueryPage
    """
    if visible_columns is None:
        visible_columns = state.visible_columns
    _validate_columns(dataset, state, visible_columns)
    page_size = settings.page_size
    wanted = set(visible_columns)
    ordered_visible = [col for col in dataset.columns if col in wanted]

    filtered = filter_rows(dataset.rows, state.search_term, ordered_visible)
    ordered = sort_rows(filtered, state.sort)
    page_rows, page, total_pages = paginate(ordered, state.page, page_size)

    total = len(ordered)
    start_index = (page - 1) * page_size + 1 if total else 0
    end_index = min(page * page_size, total)

    return QueryPage(
        columns=ordered_visible,
        rows=page_rows,
        total_filtered_count=total,
        total_pages=total_pages,
        page=page,
        page_size=page_size,
        start_index=start_index,
        end_index=end_index
    )
