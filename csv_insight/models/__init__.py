"""数据模型包"""

from csv_insight.models.dataset import (
    Cell,
    ColumnKind,
    ColumnSchema,
    Dataset,
    DatasetMetadata,
    NumericCell,
    Row,
    TextCell,
    make_cell
)
from csv_insight.models.statistics import (
    ColumnStatistics,
    CorrelationMatrix
)
from csv_insight.models.query import (
    SortSpec,
    QueryState,
    QueryAction,
    QueryPage
)
from csv_insight.models.response import (
    UploadResponse,
    StatisticsResponse,
    CorrelationResponse,
    QueryResponse
)

__all__ = [
    # Dataset
    "Cell",
    "ColumnKind",
    "ColumnSchema",
    "Dataset",
    "DatasetMetadata",
    "NumericCell",
    "Row",
    "TextCell",
    "make_cell",
    # Statistics
    "ColumnStatistics",
    "CorrelationMatrix",
    # Query
    "SortSpec",
    "QueryState",
    "QueryAction",
    "QueryPage",
    # Response
    "UploadResponse",
    "StatisticsResponse",
    "CorrelationResponse",
    "QueryResponse",
]
