from __future__ import annotations
import logging
from typing import Any, List, Optional, Sequence
from urllib.parse import quote

from config_settings import Settings
from galaxy_client import GalaxyClient
from galaxy_errors import EmptyJobList, PayloadTooLarge, ValidationError
from galaxy_models import DatasetResult, InvokeResult, JobStatus, UploadResult
from galaxy_utils import (
    AMRFINDER_TOOL_IDS,
    build_amrfinder_payload,
    build_paste_payload,
    first_job_id,
    is_terminal,
    parse_upload_response,
    resolve_candidates,
)

logger = logging.getLogger("galaxy_service")


class GalaxyService:
    def __init__(self, client: GalaxyClient, settings: Settings,
                 tool_ids: Optional[Sequence[str]] = None):
        self.client = client
        self.max_upload_bytes = settings.MAX_UPLOAD_BYTES
        self.history_name = settings.HISTORY_NAME
        self.tool_ids: List[str] = list(tool_ids or AMRFINDER_TOOL_IDS)

    # ---------------------------------------------------------
    # Upload
    # ---------------------------------------------------------
    def validate_upload(self, file_bytes: Optional[bytes], file_name: Optional[str]) -> None:
        if file_bytes is None or not file_name:
            raise ValidationError("No file was uploaded")
        if len(file_bytes) > self.max_upload_bytes:
            raise PayloadTooLarge(len(file_bytes), self.max_upload_bytes)

    async def current_history_id(self) -> str:
        # NOTE: the first history in list order is arbitrary; Galaxy happens to
        # list the most recently updated one first.
        histories = await self.client.call("/histories")
        if histories:
            return str(histories[0]["id"])

        logger.info("No history found, creating %r", self.history_name)
        created = await self.client.call("/histories", method="POST",
                                         body={"name": self.history_name})
        return str(created["id"])

    async def upload(self, file_bytes: Optional[bytes], file_name: Optional[str]) -> UploadResult:
        self.validate_upload(file_bytes, file_name)
        logger.info("Uploading file: %s (%d bytes)", file_name, len(file_bytes))

        history_id = await self.current_history_id()
        logger.info("Using history id: %s", history_id)

        result = await self.client.call(
            f"/histories/{history_id}/contents",
            method="POST",
            body=build_paste_payload(file_bytes, file_name),
        )
        shape = parse_upload_response(result, file_name)
        logger.info("Upload succeeded (%s): dataset %s", type(shape).__name__, shape.dataset_id)

        return UploadResult(
            dataset_id=shape.dataset_id,
            dataset_name=shape.dataset_name,
            history_id=history_id,
            upload_info=result,
        )

    # ---------------------------------------------------------
    # AMRFinder
    # ---------------------------------------------------------
    async def invoke(self, dataset_id: Optional[str], organism: str = "Bacteria",
                     history_id: Optional[str] = None) -> InvokeResult:
        if not dataset_id:
            raise ValidationError("Missing dataset_id parameter")
        organism = organism or "Bacteria"
        logger.info("Running AMRFinder: dataset=%s organism=%s history=%s",
                    dataset_id, organism, history_id)

        async def submit(tool_id: str) -> Any:
            payload = build_amrfinder_payload(tool_id, dataset_id, organism, history_id)
            return await self.client.call("/tools", method="POST", body=payload)

        resolution = await resolve_candidates(self.tool_ids, submit)
        job_id = first_job_id(resolution.result)
        if job_id is None:
            raise EmptyJobList(resolution.candidate, resolution.result)

        logger.info("AMRFinder job %s submitted with tool id %s after %d attempt(s)",
                    job_id, resolution.candidate, len(resolution.attempts))
        return InvokeResult(job_id=job_id, tool_id=resolution.candidate, job_info=resolution.result)

    # ---------------------------------------------------------
    # Status
    # ---------------------------------------------------------
    async def get_job_status(self, job_id: str) -> JobStatus:
        if not job_id:
            raise ValidationError("Missing job_id parameter")
        result = await self.client.call(f"/jobs/{job_id}")
        state = result.get("state") if isinstance(result, dict) else None
        logger.info("Job status %s: %s", job_id, state)
        return JobStatus(job_id=job_id, state=state, terminal=is_terminal(state), job_info=result)

    async def get_dataset_result(self, dataset_id: str) -> DatasetResult:
        if not dataset_id:
            raise ValidationError("Missing dataset_id parameter")
        info = await self.client.call(f"/datasets/{dataset_id}")
        state = info.get("state") if isinstance(info, dict) else None
        if state != "ok":
            return DatasetResult(dataset_id=dataset_id, ready=False, state=state, dataset_info=info)

        content = await self.client.call(f"/datasets/{dataset_id}/display",
                                         headers={"Accept": "text/plain"})
        return DatasetResult(dataset_id=dataset_id, ready=True, state=state,
                             content=content, dataset_info=info)

    # ---------------------------------------------------------
    # Pass-through
    # ---------------------------------------------------------
    async def list_histories(self) -> Any:
        return await self.client.call("/histories")

    async def search_tools(self, q: str = "amr") -> Any:
        return await self.client.call(f"/tools?q={quote(q, safe='')}")

    async def get_tool(self, tool_id: str) -> Any:
        if not tool_id:
            raise ValidationError("Missing tool_id parameter")
        return await self.client.call(f"/tools/{quote(tool_id, safe='/')}")

    async def check_connection(self) -> Any:
        return await self.client.version()
