from typing import Any, Optional
from pydantic import BaseModel


class RunAmrfinderRequest(BaseModel):
    dataset_id: Optional[str] = None
    organism: str = "Bacteria"
    history_id: Optional[str] = None


class UploadResult(BaseModel):
    dataset_id: str
    dataset_name: str
    history_id: str
    upload_info: Any = None


class InvokeResult(BaseModel):
    job_id: str
    tool_id: str
    job_info: Any = None


class JobStatus(BaseModel):
    job_id: str
    state: Optional[str] = None
    terminal: bool = False
    job_info: Any = None


class DatasetResult(BaseModel):
    dataset_id: str
    ready: bool
    state: Optional[str] = None
    content: Any = None
    dataset_info: Any = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: Optional[str] = None
