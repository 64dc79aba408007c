"""API 响应模型"""

from typing import List, Dict, Any, Optional
from pydantic import BaseModel, Field

from csv_insight.models.dataset import ColumnSchema
from csv_insight.models.query import QueryPage, QueryState


class UploadResponse(BaseModel):
    """文件上传响应"""
    dataset_id: str = Field(..., description="数据集ID")
    filename: str = Field(..., description="文件名")
    size_bytes: int = Field(..., description="文件大小")
    row_count: int = Field(..., description="总行数")
    column_count: int = Field(..., description="总列数")
    columns: List[ColumnSchema] = Field(default_factory=list, description="列 Schema")


class StatisticsResponse(BaseModel):
    """描述统计响应"""
    dataset_id: str = Field(..., description="数据集ID")
    statistics: Dict[str, Dict[str, Optional[float]]] = Field(..., description="全精度统计量（NaN 为 null）")
    formatted: Dict[str, Dict[str, str]] = Field(..., description="展示用统计量")


class CorrelationResponse(BaseModel):
    """相关矩阵响应"""
    dataset_id: str = Field(..., description="数据集ID")
    columns: List[str] = Field(..., description="数值列名")
    matrix: Dict[str, Dict[str, Optional[float]]] = Field(..., description="相关系数矩阵（NaN 为 null）")
    formatted: List[Dict[str, Any]] = Field(..., description="展示用矩阵")


class QueryResponse(BaseModel):
    """查询响应"""
    state: QueryState = Field(..., description="查询状态（页码已截断）")
    result: QueryPage = Field(..., description="结果页")
