"""FastAPI 主应用"""

from pathlib import Path
from urllib.parse import quote

from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel

from csv_insight.core.config import settings
from csv_insight.core.constants import SUPPORTED_FILE_EXTENSIONS
from csv_insight.engines.analysis_engine import get_analysis_engine
from csv_insight.engines.csv_loader import CsvParseError
from csv_insight.models.query import QueryAction, QueryState
from csv_insight.models.response import (
    CorrelationResponse,
    QueryResponse,
    StatisticsResponse,
    UploadResponse
)
from csv_insight.utils.logger import log


# 创建应用
app = FastAPI(
    title="CSV Insight",
    description="表格数据描述统计、相关分析与交互浏览",
    version="0.1.0",
    debug=settings.debug
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 请求模型
class QueryActionRequest(BaseModel):
    """查询动作请求"""
    state: QueryState
    action: QueryAction


def _ensure_dataset(dataset_id: str):
    if not get_analysis_engine().dataset_manager.dataset_exists(dataset_id):
        raise HTTPException(status_code=404, detail=f"数据集不存在: {dataset_id}")


@app.get("/")
async def root():
    """根路径"""
    return {
        "name": "CSV Insight",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health():
    """健康检查"""
    return {"status": "healthy"}


@app.post("/upload", response_model=UploadResponse)
async def upload_file(file: UploadFile = File(...)):
    """
    上传 CSV 文件并创建数据集

    支持格式：CSV (.csv)
    """
    log.info(f"接收文件上传: {file.filename}")

    # 检查文件类型
    filename = file.filename or ""
    suffix = Path(filename).suffix.lower()
    if suffix not in SUPPORTED_FILE_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"不支持的文件类型: {suffix or filename}"
        )

    content = await file.read()

    # 检查文件大小
    max_size = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_size:
        raise HTTPException(
            status_code=400,
            detail=f"文件大小超过限制: {len(content)} > {max_size}"
        )

    engine = get_analysis_engine()
    engine.cleanup_expired_datasets()

    try:
        metadata = engine.dataset_manager.create_dataset(content, filename)
    except CsvParseError as e:
        log.error(f"创建数据集失败: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return UploadResponse(
        dataset_id=metadata.dataset_id,
        filename=metadata.original_filename,
        size_bytes=metadata.size_bytes,
        row_count=metadata.row_count,
        column_count=metadata.column_count,
        columns=metadata.columns_schema
    )


@app.get("/datasets")
async def list_datasets():
    """列出当前保存的数据集及汇总信息"""
    engine = get_analysis_engine()
    engine.cleanup_expired_datasets()
    manager = engine.dataset_manager

    return {
        "datasets": [
            {
                "dataset_id": metadata.dataset_id,
                "filename": metadata.original_filename,
                "row_count": metadata.row_count,
                "column_count": metadata.column_count,
                "created_at": metadata.created_at.isoformat()
            }
            for metadata in manager.get_all_datasets()
        ],
        "stats": manager.get_stats()
    }


@app.get("/dataset/{dataset_id}/schema")
async def get_dataset_schema(dataset_id: str):
    """获取数据集 Schema"""
    _ensure_dataset(dataset_id)
    metadata = get_analysis_engine().dataset_manager.get_schema(dataset_id)

    return {
        "dataset_id": metadata.dataset_id,
        "columns": [col.model_dump(mode="json") for col in metadata.columns_schema],
        "row_count": metadata.row_count
    }


@app.get("/dataset/{dataset_id}/statistics", response_model=StatisticsResponse)
async def get_statistics(dataset_id: str):
    """数值列描述统计"""
    _ensure_dataset(dataset_id)
    statistics = get_analysis_engine().statistics(dataset_id)

    return StatisticsResponse(
        dataset_id=dataset_id,
        statistics={col: stats.to_dict() for col, stats in statistics.items()},
        formatted={
            col: stats.formatted(settings.display_decimals)
            for col, stats in statistics.items()
        }
    )


@app.get("/dataset/{dataset_id}/correlations", response_model=CorrelationResponse)
async def get_correlations(dataset_id: str):
    """数值列相关矩阵"""
    _ensure_dataset(dataset_id)
    matrix = get_analysis_engine().correlations(dataset_id)

    return CorrelationResponse(
        dataset_id=dataset_id,
        columns=matrix.columns,
        matrix=matrix.to_dict(),
        formatted=matrix.formatted(settings.display_decimals)
    )


@app.get("/dataset/{dataset_id}/query/initial", response_model=QueryState)
async def get_initial_state(dataset_id: str):
    """新数据集的默认查询状态"""
    _ensure_dataset(dataset_id)
    return get_analysis_engine().initial_state(dataset_id)


@app.post("/dataset/{dataset_id}/query", response_model=QueryResponse)
async def query_dataset(dataset_id: str, state: QueryState):
    """按给定状态执行 过滤 → 排序 → 分页"""
    _ensure_dataset(dataset_id)
    try:
        page = get_analysis_engine().query(dataset_id, state)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if page.page != state.page:
        state = state.model_copy(update={"page": page.page})
    return QueryResponse(state=state, result=page)


@app.post("/dataset/{dataset_id}/query/action", response_model=QueryResponse)
async def apply_query_action(dataset_id: str, request: QueryActionRequest):
    """执行用户动作（搜索、排序、切换列、翻页）"""
    _ensure_dataset(dataset_id)
    try:
        state, page = get_analysis_engine().apply_action(dataset_id, request.state, request.action)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return QueryResponse(state=state, result=page)


@app.get("/dataset/{dataset_id}/export")
async def export_dataset(dataset_id: str):
    """导出为 CSV"""
    _ensure_dataset(dataset_id)
    filename, content = get_analysis_engine().dataset_manager.export_dataset(dataset_id)

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}
    )


@app.delete("/dataset/{dataset_id}")
async def delete_dataset(dataset_id: str):
    """清除数据集"""
    _ensure_dataset(dataset_id)
    get_analysis_engine().delete_dataset(dataset_id)
    return {"dataset_id": dataset_id, "deleted": True}


if __name__ == "__main__":
    import uvicorn

    log.info(f"启动服务: {settings.api_host}:{settings.api_port}")

    uvicorn.run(
        "csv_insight.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
