from .base import BaseApiClient
from ..models import IngestPayload
from ..utils.async_utils import retry_async


class IngestClient(BaseApiClient):
    """Posts analyzed items to the content store. The server upserts by id/url."""

    INGEST_PATH = "/api/ingest"

    @retry_async()
    async def post_ingest(self, payload: IngestPayload) -> None:
        await self._request("POST", self.INGEST_PATH, "post_ingest", json=payload.to_wire())
        self.logger.debug("item_ingested", url=payload.url, source_id=payload.source_id)
