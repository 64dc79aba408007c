"""Analysis Engine - 带缓存的分析入口"""

import time
import hashlib
import json
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from csv_insight.core.config import settings
from csv_insight.engines.correlation import compute_correlations
from csv_insight.engines.dataset_manager import DatasetManager, get_dataset_manager
from csv_insight.engines.query_pipeline import query_rows
from csv_insight.engines.schema_inferencer import infer_schema, numeric_columns
from csv_insight.engines.statistics import compute_statistics
from csv_insight.models.dataset import ColumnKind, Dataset
from csv_insight.models.query import QueryAction, QueryPage, QueryState
from csv_insight.models.statistics import ColumnStatistics, CorrelationMatrix
from csv_insight.utils.logger import log

T = TypeVar("T")


class AnalysisCache:
    """简单的内存结果缓存，按 (数据集, 操作, 输入) 建键"""

    def __init__(self, max_size: int = 100, ttl_seconds: int = 300):
        self.cache: Dict[str, Dict[str, Any]] = {}
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds

    def _make_key(self, dataset_id: str, operation: str, inputs: Any = None) -> str:
        """生成缓存键"""
        payload = {"dataset_id": dataset_id, "operation": operation, "inputs": inputs}
        payload_json = json.dumps(payload, sort_keys=True, ensure_ascii=False)
        return hashlib.md5(payload_json.encode()).hexdigest()

    def get(self, dataset_id: str, operation: str, inputs: Any = None) -> Optional[Any]:
        """获取缓存结果"""
        key = self._make_key(dataset_id, operation, inputs)
        if key in self.cache:
            entry = self.cache[key]
            # 检查是否过期
            if time.time() - entry["timestamp"] < self.ttl_seconds:
                log.debug(f"缓存命中: {operation} {key[:8]}...")
                return entry["result"]
            del self.cache[key]
        return None

    def set(self, dataset_id: str, operation: str, result: Any, inputs: Any = None):
        """设置缓存"""
        # 如果缓存已满，删除最旧的条目
        if len(self.cache) >= self.max_size:
            oldest_key = min(self.cache.keys(), key=lambda k: self.cache[k]["timestamp"])
            del self.cache[oldest_key]

        key = self._make_key(dataset_id, operation, inputs)
        self.cache[key] = {
            "dataset_id": dataset_id,
            "result": result,
            "timestamp": time.time()
        }
        log.debug(f"缓存写入: {operation} {key[:8]}...")

    def invalidate(self, dataset_id: str) -> int:
        """删除某个数据集的全部缓存"""
        keys = [k for k, entry in self.cache.items() if entry["dataset_id"] == dataset_id]
        for key in keys:
            del self.cache[key]
        return len(keys)

    def clear(self):
        """清空缓存"""
        self.cache.clear()

    def __len__(self) -> int:
        return len(self.cache)


class AnalysisEngine:
    """分析引擎：在纯函数之上按数据集ID做记忆化"""

    def __init__(self, dataset_manager: Optional[DatasetManager] = None, cache: Optional[AnalysisCache] = None):
        self.dataset_manager = dataset_manager or get_dataset_manager()
        self.cache = cache or AnalysisCache(
            max_size=settings.cache_max_size,
            ttl_seconds=settings.cache_ttl_seconds
        )

    def _cached(self, dataset_id: str, operation: str, compute: Callable[[Dataset], T], inputs: Any = None) -> T:
        cached_result = self.cache.get(dataset_id, operation, inputs)
        if cached_result is not None:
            return cached_result

        dataset = self.dataset_manager.get_dataset(dataset_id)
        start_time = time.time()
        result = compute(dataset)
        log.info(f"{operation} 完成: dataset={dataset_id}, 耗时 {(time.time() - start_time) * 1000:.2f} ms")

        self.cache.set(dataset_id, operation, result, inputs)
        return result

    def schema(self, dataset_id: str) -> Dict[str, ColumnKind]:
        """列类型（每个数据集只推断一次）"""
        return self._cached(dataset_id, "infer_schema", infer_schema)

    def numeric_columns(self, dataset_id: str) -> List[str]:
        dataset = self.dataset_manager.get_dataset(dataset_id)
        return numeric_columns(self.schema(dataset_id), dataset.columns)

    def statistics(self, dataset_id: str) -> Dict[str, ColumnStatistics]:
        """数值列描述统计"""
        columns = self.numeric_columns(dataset_id)
        return self._cached(
            dataset_id, "compute_statistics",
            lambda dataset: compute_statistics(dataset, columns),
            inputs=columns
        )

    def correlations(self, dataset_id: str) -> CorrelationMatrix:
        """数值列相关矩阵"""
        columns = self.numeric_columns(dataset_id)
        return self._cached(
            dataset_id, "compute_correlations",
            lambda dataset: compute_correlations(dataset, columns),
            inputs=columns
        )

    def query(self, dataset_id: str, state: QueryState) -> QueryPage:
        """执行查询管道"""
        return self._cached(
            dataset_id, "query_rows",
            lambda dataset: query_rows(dataset, state),
            inputs=state.model_dump(mode="json")
        )

    def initial_state(self, dataset_id: str) -> QueryState:
        dataset = self.dataset_manager.get_dataset(dataset_id)
        return QueryState.initial(dataset.columns)

    def apply_action(self, dataset_id: str, state: QueryState, action: QueryAction) -> Tuple[QueryState, QueryPage]:
        """
        执行用户动作并返回新状态与结果页

        Args:
            dataset_id: 数据集ID
            state: 当前查询状态
            action: 用户动作

        Returns:
            (新状态, 结果页)；页码已截断到有效范围
        """
        columns = self.dataset_manager.get_dataset(dataset_id).columns

        if action.type == "set_search":
            state = state.with_search_term(str(action.value or ""))
        elif action.type == "toggle_sort":
            state = state.toggle_sort(self._column_arg(action, columns))
        elif action.type == "toggle_column":
            state = state.toggle_column(self._column_arg(action, columns), columns)
        elif action.type == "toggle_all_columns":
            state = state.toggle_all_columns(columns)
        else:
            total_pages = self.query(dataset_id, state).total_pages
            if action.type == "next_page":
                state = state.next_page(total_pages)
            elif action.type == "previous_page":
                state = state.previous_page(total_pages)
            else:
                state = state.with_page(self._page_arg(action), total_pages)

        page = self.query(dataset_id, state)
        if page.page != state.page:
            state = state.model_copy(update={"page": page.page})
        return state, page

    def _column_arg(self, action: QueryAction, columns: List[str]) -> str:
        if action.value not in columns:
            raise ValueError(f"列不存在: {action.value}")
        return action.value

    def _page_arg(self, action: QueryAction) -> int:
        try:
            return int(action.value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"页码无效: {action.value}") from e

    def delete_dataset(self, dataset_id: str):
        """删除数据集并失效其缓存"""
        self.dataset_manager.delete_dataset(dataset_id)
        removed = self.cache.invalidate(dataset_id)
        log.info(f"数据集 {dataset_id} 缓存已失效: {removed} 条")

    def cleanup_expired_datasets(self) -> int:
        """清理过期数据集并失效其缓存"""
        before = set(self.dataset_manager.datasets)
        cleaned = self.dataset_manager.cleanup_expired_datasets()
        for dataset_id in before - set(self.dataset_manager.datasets):
            self.cache.invalidate(dataset_id)
        return cleaned


# 全局单例
_analysis_engine = None


def get_analysis_engine() -> AnalysisEngine:
    """获取 AnalysisEngine 单例"""
    global _analysis_engine
    if _analysis_engine is None:
        _analysis_engine = AnalysisEngine()
    return _analysis_engine
