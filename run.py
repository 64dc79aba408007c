"""启动脚本"""

import uvicorn
from csv_insight.core.config import settings
from csv_insight.utils.logger import log


if __name__ == "__main__":
    log.info("="*60)
    log.info("CSV Insight - 启动中")
    log.info("="*60)
    log.info(f"服务地址: http://{settings.api_host}:{settings.api_port}")
    log.info(f"API 文档: http://{settings.api_host}:{settings.api_port}/docs")
    log.info(f"调试模式: {settings.debug}")
    log.info(f"每页行数: {settings.page_size}")
    log.info("="*60)

    uvicorn.run(
        "csv_insight.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info"
    )
