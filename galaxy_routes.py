import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse

from galaxy_errors import GalaxyError, PayloadTooLarge, ValidationError
from galaxy_models import ErrorResponse, RunAmrfinderRequest
from galaxy_service import GalaxyService

logger = logging.getLogger("galaxy_routes")

router = APIRouter(prefix="/api", tags=["galaxy"])


def get_service(request: Request) -> GalaxyService:
    return request.app.state.galaxy_service


def fail(operation: str, e: Exception) -> JSONResponse:
    if isinstance(e, PayloadTooLarge):
        status = 413
    elif isinstance(e, ValidationError):
        status = 400
    else:
        status = 500
    logger.error("%s failed: %s: %s", operation, type(e).__name__, e)
    return JSONResponse(status_code=status, content=ErrorResponse(error=str(e)).model_dump(exclude_none=True))


@router.get("/test-galaxy")
async def test_galaxy(service: GalaxyService = Depends(get_service)):
    try:
        version = await service.check_connection()
    except GalaxyError as e:
        return fail("test-galaxy", e)
    return {"success": True, "galaxy_version": version, "api_key_valid": True}


@router.post("/upload")
async def upload(file: Optional[UploadFile] = File(None),
                 service: GalaxyService = Depends(get_service)):
    try:
        if file is None:
            raise ValidationError("No file was uploaded")
        if file.size is not None and file.size > service.max_upload_bytes:
            raise PayloadTooLarge(file.size, service.max_upload_bytes)
        result = await service.upload(await file.read(), file.filename)
    except GalaxyError as e:
        return fail("upload", e)
    return {"success": True, **result.model_dump()}


@router.post("/run-amrfinder")
async def run_amrfinder(payload: RunAmrfinderRequest,
                        service: GalaxyService = Depends(get_service)):
    try:
        result = await service.invoke(payload.dataset_id, payload.organism, payload.history_id)
    except GalaxyError as e:
        return fail("run-amrfinder", e)
    return {"success": True, **result.model_dump()}


@router.get("/job-status/{job_id}")
async def job_status(job_id: str, service: GalaxyService = Depends(get_service)):
    try:
        result = await service.get_job_status(job_id)
    except GalaxyError as e:
        return fail("job-status", e)
    return {"success": True, **result.model_dump()}


@router.get("/dataset/{dataset_id}")
async def dataset(dataset_id: str, service: GalaxyService = Depends(get_service)):
    try:
        result = await service.get_dataset_result(dataset_id)
    except GalaxyError as e:
        return fail("dataset", e)
    if not result.ready:
        return {"success": False, "ready": False, "state": result.state, "error": "Dataset is not ready yet"}
    return {"success": True, **result.model_dump()}


@router.get("/histories")
async def histories(service: GalaxyService = Depends(get_service)):
    try:
        result = await service.list_histories()
    except GalaxyError as e:
        return fail("histories", e)
    return {"success": True, "histories": result}


@router.get("/tools/search")
async def tools_search(q: str = "amr", service: GalaxyService = Depends(get_service)):
    try:
        result = await service.search_tools(q)
    except GalaxyError as e:
        return fail("tools/search", e)
    return {"success": True, "tools": result}


@router.get("/tools/{tool_id:path}")
async def tool_detail(tool_id: str, service: GalaxyService = Depends(get_service)):
    try:
        result = await service.get_tool(tool_id)
    except GalaxyError as e:
        return fail("tools", e)
    return {"success": True, "tool": result}
