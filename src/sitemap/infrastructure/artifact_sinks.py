import os
from pathlib import Path
from typing import Sequence

from src.config.logger_config import logger
from src.sitemap.application.ports import ArtifactSinkPort, CacheServicePort
from src.sitemap.domain.models import STDOUT_PATH, Artifact


class CacheArtifactSink(ArtifactSinkPort):
    def __init__(self, cache: CacheServicePort, namespace: str, ttl_seconds: int) -> None:
        self.cache = cache
        self.namespace = namespace
        self.ttl_seconds = ttl_seconds

    async def write_artifacts(self, artifacts: Sequence[Artifact]) -> None:
        # 先清除再寫入，並非原子操作；中途失敗時下一次讀取會重新建置
        await self.cache.clear(self.namespace)
        for artifact in artifacts:
            await self.cache.set(self.namespace, artifact.name, artifact.data, self.ttl_seconds)
        logger.info("Cached {} sitemap artifacts in namespace {}", len(artifacts), self.namespace)


class FileArtifactSink(ArtifactSinkPort):
    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)

    async def write_artifacts(self, artifacts: Sequence[Artifact]) -> None:
        for artifact in artifacts:
            self.write_artifact(artifact)

    def write_artifact(self, artifact: Artifact) -> Path | None:
        file_path = self.output_dir / artifact.name
        if str(file_path) == STDOUT_PATH:
            # writeFileSync 到 /dev/stdout 在 macOS 上會出錯，直接寫入 fd 1
            os.write(1, artifact.data)
            return None
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(artifact.data)
        logger.info("Wrote sitemap artifact: {}", file_path)
        return file_path
