"""CSV 读写：文本 ↔ Dataset"""

import io
from typing import Union

import pandas as pd

from csv_insight.engines.schema_inferencer import parse_number
from csv_insight.models.dataset import Dataset, NumericCell, TextCell
from csv_insight.utils.logger import log


class CsvParseError(ValueError):
    """CSV 解析错误"""


def _to_cell(raw: str) -> Union[NumericCell, TextCell]:
    value = raw.strip()
    number = parse_number(value)
    if number is None:
        return TextCell(value=value)
    return NumericCell(value=number)


def load_csv(content: Union[str, bytes]) -> Dataset:
    """
    解析 CSV 文本

    首行为表头；字段数多于表头的行被跳过，少于表头的行以空白补齐，
    全部为空白的行被丢弃。每个单元格去除首尾空白后，可解析为数字的
    成为 NumericCell，其余为 TextCell。

    Args:
        content: CSV 文本或 UTF-8 字节

    Returns:
        Dataset
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CsvParseError("文件不是有效的 UTF-8 文本") from e

    if not content.strip():
        raise CsvParseError("CSV 文件为空")

    try:
        df = pd.read_csv(
            io.StringIO(content),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            on_bad_lines="skip"
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        log.error(f"读取 CSV 失败: {e}")
        raise CsvParseError(f"CSV 解析失败: {e}") from e

    columns = [str(col) for col in df.columns]
    if not columns:
        raise CsvParseError("CSV 文件为空")

    df = df.fillna("")
    rows = []
    for record in df.itertuples(index=False, name=None):
        if not any(str(value).strip() for value in record):
            continue
        rows.append({col: _to_cell(str(value)) for col, value in zip(columns, record)})

    if not rows:
        raise CsvParseError("CSV 文件中没有有效数据行")

    log.info(f"CSV 解析成功: {len(rows)} 行, {len(columns)} 列")
    return Dataset(columns=columns, rows=rows)


def export_csv(dataset: Dataset) -> str:
    """
    将数据集写回 CSV 文本

    数值以最短文本形式输出（整数值不带 .0）。
    """
    df = pd.DataFrame(
        [[row[col].as_text() for col in dataset.columns] for row in dataset.rows],
        columns=dataset.columns
    )
    return df.to_csv(index=False, lineterminator="\n")
