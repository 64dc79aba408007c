"""查询管道测试"""

import pytest

from csv_insight.core.config import settings
from csv_insight.engines.query_pipeline import (
    filter_rows,
    paginate,
    query_rows,
    sort_rows
)
from csv_insight.models.dataset import Dataset
from csv_insight.models.query import QueryState, SortSpec


def _ids(rows, col="id"):
    return [row[col].value for row in rows]


def test_first_page_of_25_rows(numbered_dataset):
    """空搜索，25 行，每页 10 行"""
    state = QueryState.initial(numbered_dataset.columns)
    page = query_rows(numbered_dataset, state)
    assert page.total_filtered_count == 25
    assert page.total_pages == 3
    assert page.page == 1
    assert _ids(page.rows) == [float(i) for i in range(1, 11)]
    assert (page.start_index, page.end_index) == (1, 10)


def test_page_is_clamped(numbered_dataset):
    """越界页码截断到最后一页"""
    state = QueryState(visible_columns=numbered_dataset.columns, page=99)
    page = query_rows(numbered_dataset, state)
    assert page.page == 3
    assert _ids(page.rows) == [float(i) for i in range(21, 26)]
    assert (page.start_index, page.end_index) == (21, 25)


def test_empty_result_has_one_page(numbered_dataset):
    """没有匹配行时仍为 1 页"""
    state = QueryState(search_term="zzz", visible_columns=numbered_dataset.columns, page=4)
    page = query_rows(numbered_dataset, state)
    assert page.total_filtered_count == 0
    assert page.total_pages == 1
    assert page.page == 1
    assert page.rows == []
    assert (page.start_index, page.end_index) == (0, 0)


def test_page_size_comes_from_settings(numbered_dataset):
    """调用方传入的每页行数不生效"""
    state = QueryState.model_validate({"visible_columns": numbered_dataset.columns, "page_size": 3})
    page = query_rows(numbered_dataset, state)
    assert page.page_size == settings.page_size == 10
    assert len(page.rows) == 10
    assert page.total_pages == 3


def test_search_is_case_insensitive(people_dataset):
    """搜索忽略大小写"""
    rows = filter_rows(people_dataset.rows, "pARis", people_dataset.columns)
    assert [row["name"].value for row in rows] == ["Alice", "Carol"]


def test_search_matches_numbers_as_text(people_dataset):
    """数值按字符串表示匹配"""
    rows = filter_rows(people_dataset.rows, "27", people_dataset.columns)
    assert [row["name"].value for row in rows] == ["Bob", "Dave"]
    rows = filter_rows(people_dataset.rows, "75.25", people_dataset.columns)
    assert [row["name"].value for row in rows] == ["Carol"]


def test_hidden_columns_are_not_searched(people_dataset):
    """不可见列不参与搜索"""
    assert filter_rows(people_dataset.rows, "paris", ["name", "age"]) == []
    state = QueryState(search_term="paris", visible_columns=["name"])
    assert query_rows(people_dataset, state).total_filtered_count == 0
    page = query_rows(people_dataset, state, visible_columns=["city"])
    assert page.total_filtered_count == 2
    assert page.columns == ["city"]


def test_filter_is_monotonic(numbered_dataset):
    """更具体的搜索词不会增加结果数"""
    columns = numbered_dataset.columns
    counts = [
        len(filter_rows(numbered_dataset.rows, term, columns))
        for term in ["", "r", "row-", "row-1", "row-12"]
    ]
    assert counts == sorted(counts, reverse=True)
    assert counts[-1] == 1


def test_sort_numeric_and_text(people_dataset):
    """数值按数值排序，文本按字典序"""
    by_age = sort_rows(people_dataset.rows, SortSpec(col="age"))
    assert _ids(by_age, "age") == [19.0, 27.0, 27.0, 34.0, 41.0]
    by_name = sort_rows(people_dataset.rows, SortSpec(col="name", dir="desc"))
    assert [row["name"].value for row in by_name] == ["Eve", "Dave", "Carol", "Bob", "Alice"]


def test_sort_is_stable_in_both_directions(people_dataset):
    """相等键保持原相对顺序"""
    asc = sort_rows(people_dataset.rows, SortSpec(col="age", dir="asc"))
    desc = sort_rows(people_dataset.rows, SortSpec(col="age", dir="desc"))
    assert [row["name"].value for row in asc] == ["Eve", "Bob", "Dave", "Alice", "Carol"]
    assert [row["name"].value for row in desc] == ["Carol", "Alice", "Bob", "Dave", "Eve"]


def test_desc_reverses_asc_without_duplicates(people_dataset):
    """无重复键时降序为升序的逆序"""
    asc = sort_rows(people_dataset.rows, SortSpec(col="score", dir="asc"))
    desc = sort_rows(people_dataset.rows, SortSpec(col="score", dir="desc"))
    assert desc == list(reversed(asc))


def test_sort_mixed_column_numbers_first():
    """混合列：数值在前，不做跨类型转换"""
    dataset = Dataset.from_records([{"v": "b"}, {"v": 10}, {"v": "a"}, {"v": 2}])
    rows = sort_rows(dataset.rows, SortSpec(col="v"))
    assert [row["v"].value for row in rows] == [2.0, 10.0, "a", "b"]


def test_no_sort_keeps_filtered_order(people_dataset):
    """未设置排序时保持原顺序"""
    assert sort_rows(people_dataset.rows, None) == people_dataset.rows


def test_pages_cover_result_exactly_once(numbered_dataset):
    """所有页拼接后恰好还原完整结果"""
    state = QueryState(
        search_term="row",
        sort=SortSpec(col="id", dir="desc"),
        visible_columns=numbered_dataset.columns
    )
    first = query_rows(numbered_dataset, state)
    collected = []
    for page_number in range(1, first.total_pages + 1):
        page = query_rows(numbered_dataset, state.model_copy(update={"page": page_number}))
        collected.extend(page.rows)
    expected = sort_rows(numbered_dataset.rows, state.sort)
    assert collected == expected


def test_paginate_helper():
    """分页辅助函数"""
    rows = list(range(23))
    page_rows, page, total_pages = paginate(rows, 0, 10)
    assert (page, total_pages) == (1, 3)
    assert page_rows == list(range(10))


def test_unknown_columns_rejected(people_dataset):
    """引用不存在的列"""
    with pytest.raises(ValueError):
        query_rows(people_dataset, QueryState(sort=SortSpec(col="missing"), visible_columns=["name"]))
    with pytest.raises(ValueError):
        query_rows(people_dataset, QueryState(visible_columns=["missing"]))


def test_dataset_is_not_mutated(people_dataset):
    """查询不修改数据集"""
    before = list(people_dataset.rows)
    query_rows(people_dataset, QueryState(sort=SortSpec(col="age", dir="desc"), visible_columns=people_dataset.columns))
    assert people_dataset.rows == before
