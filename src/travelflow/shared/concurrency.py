import asyncio
from travelflow.shared.config.settings import settings

COZE_STREAM_SEMAPHORE = asyncio.Semaphore(settings.COZE_MAX_CONCURRENCY)
