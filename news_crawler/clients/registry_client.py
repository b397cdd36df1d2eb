from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from .base import BaseApiClient
from ..exceptions import ValidationError
from ..models import Source, SourcesResponse, SourceStatusUpdate
from ..utils.async_utils import retry_async


class SourceRegistryClient(BaseApiClient):
    """Reads due sources from the admin API and writes crawl outcomes back."""

    SOURCES_PATH = "/api/admin/sources"

    @retry_async()
    async def fetch_due_sources(self, limit: Optional[int] = None) -> List[Source]:
        response = await self._request(
            "GET",
            self.SOURCES_PATH,
            "fetch_due_sources",
            params={"limit": limit or self.config.sources_limit}
        )
        try:
            data = SourcesResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise ValidationError(f"Invalid sources response: {e}")

        self.logger.info("due_sources_fetched", count=len(data.sources))
        return data.sources

    async def report_status(
        self,
        source_id: str,
        crawled_at: int,
        success: bool,
        error_count_delta: Optional[int] = None
    ) -> bool:
        """
        Report one source's crawl outcome. Advisory only: never raises.

        Returns:
            True if the registry accepted the update
        """
        fields = {"id": source_id, "crawled_at": crawled_at, "success": success}
        if error_count_delta is not None:
            fields["error_count_delta"] = error_count_delta
        update = SourceStatusUpdate(**fields)

        try:
            await self._post_status(update)
            return True
        except Exception as e:
            self.logger.warning("source_status_report_failed", source_id=source_id, error=str(e))
            return False

    @retry_async()
    async def _post_status(self, update: SourceStatusUpdate) -> None:
        await self._request("POST", self.SOURCES_PATH, "report_status", json=update.to_wire())
