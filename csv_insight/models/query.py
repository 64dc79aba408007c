"""查询相关模型"""

from typing import List, Optional, Any, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator

from csv_insight.core.constants import QUERY_ACTIONS
from csv_insight.models.dataset import Row


class SortSpec(BaseModel):
    """排序规则"""
    model_config = ConfigDict(frozen=True)

    col: str = Field(..., description="排序列名")
    dir: Literal["asc", "desc"] = Field("asc", description="排序方向")


class QueryState(BaseModel):
    """
    交互查询状态（由调用方持有）

    所有状态转换都返回新的 QueryState，不修改自身。修改搜索词或
    可见列集合会把页码重置为 1；修改排序不会。每页行数是固定配置
    （settings.page_size），不属于可由调用方修改的状态。
    """
    model_config = ConfigDict(frozen=True)

    search_term: str = Field("", description="搜索词")
    sort: Optional[SortSpec] = Field(None, description="排序规则")
    visible_columns: List[str] = Field(default_factory=list, description="可见列")
    page: int = Field(1, ge=1, description="当前页码（从1开始）")

    @classmethod
    def initial(cls, columns: List[str]) -> "QueryState":
        """新数据集加载时的默认状态：无搜索、无排序、全部列可见、第1页"""
        return cls(visible_columns=list(columns))

    def with_search_term(self, term: str) -> "QueryState":
        if term == self.search_term:
            return self
        return self.model_copy(update={"search_term": term, "page": 1})

    def toggle_sort(self, column: str) -> "QueryState":
        """同一列升序 → 降序，其余情况 → 该列升序"""
        if self.sort is not None and self.sort.col == column and self.sort.dir == "asc":
            sort = SortSpec(col=column, dir="desc")
        else:
            sort = SortSpec(col=column, dir="asc")
        return self.model_copy(update={"sort": sort})

    def toggle_column(self, column: str, columns: List[str]) -> "QueryState":
        """显示/隐藏单列，保持表头顺序"""
        visible = set(self.visible_columns)
        if column in visible:
            visible.discard(column)
        else:
            visible.add(column)
        ordered = [c for c in columns if c in visible]
        return self.model_copy(update={"visible_columns": ordered, "page": 1})

    def toggle_all_columns(self, columns: List[str]) -> "QueryState":
        """全部可见时隐藏全部，否则显示全部"""
        if set(self.visible_columns) >= set(columns):
            visible: List[str] = []
        else:
            visible = list(columns)
        return self.model_copy(update={"visible_columns": visible, "page": 1})

    def with_page(self, page: int, total_pages: int) -> "QueryState":
        page = max(1, min(page, max(1, total_pages)))
        return self.model_copy(update={"page": page})

    def next_page(self, total_pages: int) -> "QueryState":
        return self.with_page(self.page + 1, total_pages)

    def previous_page(self, total_pages: int) -> "QueryState":
        # 先把过期页码截断到最后一页，再后退
        current = min(self.page, max(1, total_pages))
        return self.with_page(current - 1, total_pages)


class QueryAction(BaseModel):
    """用户交互动作"""
    type: str = Field(..., description="动作类型: set_search, toggle_sort, toggle_column, toggle_all_columns, set_page, next_page, previous_page")
    value: Any = Field(None, description="动作参数")

    @field_validator("type")
    @classmethod
    def validate_action(cls, v: str) -> str:
        if v not in QUERY_ACTIONS:
            raise ValueError(f"不支持的动作: {v}. 允许的动作: {QUERY_ACTIONS}")
        return v


class QueryPage(BaseModel):
    """查询结果页"""
    columns: List[str] = Field(..., description="可见列（表头顺序）")
    rows: List[Row] = Field(..., description="当前页数据行")
    total_filtered_count: int = Field(..., ge=0, description="过滤后总行数")
    total_pages: int = Field(..., ge=1, description="总页数")
    page: int = Field(..., ge=1, description="实际页码（已截断）")
    page_size: int = Field(..., ge=1, description="每页行数")
    start_index: int = Field(0, ge=0, description="当前页首行序号（从1开始，无结果为0）")
    end_index: int = Field(0, ge=0, description="当前页末行序号")
