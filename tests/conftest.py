"""测试夹具"""

import pytest

from csv_insight.models.dataset import Dataset


@pytest.fixture
def xy_dataset() -> Dataset:
    """x 与 y 完全线性相关"""
    return Dataset.from_records([
        {"x": 1, "y": 2},
        {"x": 3, "y": 4},
        {"x": 5, "y": 6},
    ])


@pytest.fixture
def people_dataset() -> Dataset:
    """混合数值列与文本列"""
    return Dataset.from_records([
        {"name": "Alice", "city": "Paris", "age": 34, "score": 88.5},
        {"name": "Bob", "city": "Berlin", "age": 27, "score": 92.0},
        {"name": "Carol", "city": "Paris", "age": 41, "score": 75.25},
        {"name": "Dave", "city": "Rome", "age": 27, "score": 60.0},
        {"name": "Eve", "city": "Berlin", "age": 19, "score": 99.0},
    ])


@pytest.fixture
def numbered_dataset() -> Dataset:
    """25 行：id 1..25，label row-01..row-25"""
    return Dataset.from_records([
        {"id": i, "label": f"row-{i:02d}"} for i in range(1, 26)
    ])
