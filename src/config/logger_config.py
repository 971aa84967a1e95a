import os
from pathlib import Path

from loguru import logger

log_dir = Path(os.getenv("SITEMAP_LOG_DIR", "logs"))
log_file = log_dir / "sitemap_{time}.log"

logger.remove()
logger.add(
    log_file,
    rotation="256 MB",  # 每個檔案滿 256MB 就切分
    retention="10 days",  # 只保留最近 10 天的日誌
    compression="zip",
    encoding="utf-8",
    level=os.getenv("SITEMAP_LOG_LEVEL", "DEBUG"),
    delay=True,
)
