"""Dataset Manager - 数据集管理引擎（仅内存）"""

import uuid
from pathlib import Path
from typing import List, Dict, Any, Union
from datetime import datetime, timedelta

from csv_insight.core.config import settings
from csv_insight.core.constants import (
    EXPORT_FILENAME_PREFIX,
    MAX_EXAMPLE_VALUES,
    SUPPORTED_FILE_EXTENSIONS
)
from csv_insight.engines.csv_loader import CsvParseError, export_csv, load_csv
from csv_insight.engines.schema_inferencer import infer_schema
from csv_insight.models.dataset import ColumnSchema, Dataset, DatasetMetadata
from csv_insight.utils.logger import log


class DatasetManager:
    """数据集管理器"""

    def __init__(self, ttl_hours: int | None = None):
        self.ttl_hours = ttl_hours if ttl_hours is not None else settings.dataset_ttl_hours
        self.datasets: Dict[str, Dataset] = {}
        self.metadata: Dict[str, DatasetMetadata] = {}

    def create_dataset(self, content: Union[str, bytes], original_filename: str) -> DatasetMetadata:
        """
        创建数据集

        Args:
            content: CSV 文件内容
            original_filename: 原始文件名

        Returns:
            DatasetMetadata: 数据集元数据
        """
        log.info(f"创建数据集: {original_filename}")

        suffix = Path(original_filename).suffix.lower()
        if suffix not in SUPPORTED_FILE_EXTENSIONS:
            raise CsvParseError(f"不支持的文件类型: {suffix or original_filename}")

        dataset = load_csv(content)

        # 检查列数限制
        if len(dataset.columns) > settings.max_columns:
            raise CsvParseError(f"列数超过限制: {len(dataset.columns)} > {settings.max_columns}")

        dataset_id = f"ds_{uuid.uuid4().hex[:12]}"
        size_bytes = len(content.encode("utf-8")) if isinstance(content, str) else len(content)

        metadata = DatasetMetadata(
            dataset_id=dataset_id,
            original_filename=original_filename,
            row_count=dataset.row_count,
            column_count=len(dataset.columns),
            columns_schema=self._extract_schema(dataset),
            created_at=datetime.now(),
            size_bytes=size_bytes
        )

        self.datasets[dataset_id] = dataset
        self.metadata[dataset_id] = metadata

        log.info(f"数据集 {dataset_id} 创建完成: {metadata.row_count} 行, {metadata.column_count} 列")
        return metadata

    def _extract_schema(self, dataset: Dataset) -> List[ColumnSchema]:
        """提取 Dataset 的 Schema"""
        kinds = infer_schema(dataset)
        total = dataset.row_count
        schema = []

        for col in dataset.columns:
            cells = [row[col] for row in dataset.rows]
            non_blank = [cell for cell in cells if not cell.is_blank]
            blank_ratio = (total - len(non_blank)) / total if total > 0 else 0.0

            schema.append(ColumnSchema(
                name=col,
                kind=kinds[col],
                blank_ratio=round(blank_ratio, 4),
                example_values=[cell.value for cell in non_blank[:MAX_EXAMPLE_VALUES]],
                unique_count=len({cell.as_text() for cell in non_blank})
            ))

        return schema

    def get_dataset(self, dataset_id: str) -> Dataset:
        """获取数据集"""
        if dataset_id not in self.datasets:
            raise ValueError(f"数据集不存在: {dataset_id}")
        return self.datasets[dataset_id]

    def get_schema(self, dataset_id: str) -> DatasetMetadata:
        """获取数据集 Schema"""
        if dataset_id not in self.metadata:
            raise ValueError(f"数据集不存在: {dataset_id}")
        return self.metadata[dataset_id]

    def dataset_exists(self, dataset_id: str) -> bool:
        """检查数据集是否存在"""
        return dataset_id in self.datasets

    def export_dataset(self, dataset_id: str) -> tuple[str, str]:
        """
        导出数据集为 CSV

        Returns:
            (文件名, CSV 文本)
        """
        dataset = self.get_dataset(dataset_id)
        metadata = self.get_schema(dataset_id)
        filename = f"{EXPORT_FILENAME_PREFIX}{metadata.original_filename or 'data.csv'}"
        log.info(f"导出数据集 {dataset_id}: {filename}")
        return filename, export_csv(dataset)

    def cleanup_expired_datasets(self) -> int:
        """
        清理过期的数据集

        Returns:
            清理的数据集数量
        """
        now = datetime.now()
        expired_ids = [
            dataset_id for dataset_id, metadata in self.metadata.items()
            if now - metadata.created_at > timedelta(hours=self.ttl_hours)
        ]

        for dataset_id in expired_ids:
            self.delete_dataset(dataset_id)

        if expired_ids:
            log.info(f"已清理 {len(expired_ids)} 个过期数据集")

        return len(expired_ids)

    def delete_dataset(self, dataset_id: str):
        """
        删除数据集

        Args:
            dataset_id: 数据集ID
        """
        if dataset_id not in self.datasets:
            raise ValueError(f"数据集不存在: {dataset_id}")

        del self.datasets[dataset_id]
        del self.metadata[dataset_id]
        log.info(f"数据集 {dataset_id} 已删除")

    def get_all_datasets(self) -> List[DatasetMetadata]:
        """获取所有数据集列表"""
        return list(self.metadata.values())

    def get_stats(self) -> Dict[str, Any]:
        """获取数据集统计信息"""
        total_rows = sum(m.row_count for m in self.metadata.values())
        total_size = sum(m.size_bytes for m in self.metadata.values())

        return {
            "total_datasets": len(self.metadata),
            "total_rows": total_rows,
            "total_size_bytes": total_size,
            "ttl_hours": self.ttl_hours
        }


# 全局单例
_dataset_manager = None


def get_dataset_manager() -> DatasetManager:
    """获取 DatasetManager 单例"""
    global _dataset_manager
    if _dataset_manager is None:
        _dataset_manager = DatasetManager()
    return _dataset_manager
