"""描述统计测试"""

import math

import pytest

from csv_insight.engines.csv_loader import load_csv
from csv_insight.engines.schema_inferencer import infer_schema, numeric_columns
from csv_insight.engines.statistics import column_values, compute_statistics, describe
from csv_insight.models.dataset import Dataset


def test_end_to_end_example(xy_dataset):
    """x = [1, 3, 5]"""
    stats = compute_statistics(xy_dataset, ["x", "y"])
    x = stats["x"]
    assert x.count == 3
    assert x.mean == pytest.approx(3.0)
    assert x.median == 3.0
    assert x.std_dev == pytest.approx(math.sqrt(8 / 3))
    assert x.formatted()["std_dev"] == "1.63"
    assert x.formatted()["mean"] == "3.00"
    assert list(stats.keys()) == ["x", "y"]


def test_upper_median_and_truncating_quartiles():
    """偶数个值取上中位数，四分位取 floor(count * p) 下标"""
    stats = describe([4.0, 1.0, 3.0, 2.0])
    assert stats.median == 3.0
    assert stats.q1 == 2.0
    assert stats.q3 == 4.0
    assert stats.min == 1.0
    assert stats.max == 4.0


def test_known_fixture_ordering():
    """min <= q1 <= median <= q3 <= max"""
    values = [7.0, 15.0, 36.0, 39.0, 40.0, 41.0, 3.0, 22.0, 9.0]
    stats = describe(values)
    # 升序: [3, 7, 9, 15, 22, 36, 39, 40, 41]
    assert stats.q1 == 9.0
    assert stats.median == 22.0
    assert stats.q3 == 39.0
    assert stats.min <= stats.q1 <= stats.median <= stats.q3 <= stats.max


def test_population_standard_deviation():
    """除以 count 而不是 count - 1"""
    stats = describe([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])
    assert stats.mean == pytest.approx(5.0)
    assert stats.std_dev == pytest.approx(2.0)


def test_constant_column_has_zero_std_dev():
    """常数列标准差为 0"""
    stats = describe([0.1, 0.1, 0.1])
    assert stats.std_dev == 0.0
    assert stats.mean == 0.1
    assert describe([1.0, 2.0]).std_dev > 0


def test_original_order_untouched():
    """排序使用副本"""
    values = [3.0, 1.0, 2.0]
    describe(values)
    assert values == [3.0, 1.0, 2.0]


def test_blank_cells_excluded():
    """空白单元格不计入统计"""
    dataset = Dataset.from_records([{"v": 10}, {"v": ""}, {"v": 20}])
    assert column_values(dataset, "v") == [10.0, 20.0]
    stats = compute_statistics(dataset, ["v"])["v"]
    assert stats.count == 2
    assert stats.mean == pytest.approx(15.0)


def test_all_blank_column_is_degenerate():
    """无有效值时统计量为 NaN，不抛异常"""
    dataset = Dataset.from_records([{"v": "", "w": 1}, {"v": " ", "w": 2}])
    columns = numeric_columns(infer_schema(dataset))
    assert columns == ["v", "w"]
    stats = compute_statistics(dataset, columns)["v"]
    assert stats.count == 0
    assert stats.is_degenerate
    assert math.isnan(stats.mean)
    assert math.isnan(stats.median)
    assert stats.formatted()["median"] == ""


def test_extreme_magnitudes_stay_finite():
    """极大值的平方不溢出"""
    stats = describe([1e200, -1e200])
    assert stats.mean == 0.0
    assert stats.std_dev == pytest.approx(1e200)

    stats = describe([1.5e308, 1.6e308])
    assert stats.mean == pytest.approx(1.55e308)
    assert stats.std_dev == pytest.approx(0.05e308)
    assert math.isfinite(stats.mean) and math.isfinite(stats.std_dev)


def test_tiny_magnitudes_keep_spread():
    """极小值的平方不下溢为 0"""
    stats = describe([1e-200, 2e-200])
    assert stats.std_dev > 0
    assert stats.std_dev == pytest.approx(0.5e-200)
    assert stats.mean == pytest.approx(1.5e-200)


def test_large_values_from_csv():
    """含极大值的 CSV 可以正常统计"""
    dataset = load_csv("a,b\n1e200,1\n-1e200,2\n")
    stats = compute_statistics(dataset, ["a", "b"])
    assert stats["a"].std_dev == pytest.approx(1e200)
    assert stats["b"].mean == pytest.approx(1.5)
