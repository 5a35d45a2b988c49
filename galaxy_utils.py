from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from galaxy_errors import AllToolCandidatesFailed, GalaxyError, UnrecognizedUploadResponse

logger = logging.getLogger("galaxy_utils")

# Tool ids embed the toolshed repository and version, which differ between
# Galaxy servers. Most specific first.
AMRFINDER_TOOL_IDS: List[str] = [
    "toolshed.g2.bx.psu.edu/repos/iuc/amrfinderplus/amrfinderplus/3.11.26+galaxy0",
    "toolshed.g2.bx.psu.edu/repos/iuc/amrfinderplus/amrfinderplus/3.11.4+galaxy0",
    "amrfinderplus",
    "toolshed.g2.bx.psu.edu/repos/iuc/amrfinderplus/amrfinderplus",
]

AMRFINDER_FLAGS: Dict[str, bool] = {
    "report_all_equal": True,
    "plus": True,
    "name": True,
}

TERMINAL_STATES = frozenset({"ok", "error"})


# ---------------------------------------------------------
# Payloads
# ---------------------------------------------------------
def build_paste_payload(file_bytes: bytes, file_name: str) -> Dict[str, Any]:
    return {
        "src": "pasted",
        "paste_content": file_bytes.decode("utf-8", errors="replace"),
        "name": file_name,
        "file_type": "auto",
        "dbkey": "?",
    }


def build_amrfinder_payload(tool_id: str, dataset_id: str, organism: str,
                            history_id: Optional[str]) -> Dict[str, Any]:
    return {
        "tool_id": tool_id,
        "history_id": history_id,
        "inputs": {
            "nucleotide_input": {"src": "hda", "id": dataset_id},
            "organism": organism.lower(),
            **AMRFINDER_FLAGS,
        },
    }


# ---------------------------------------------------------
# Upload response shapes
# ---------------------------------------------------------
@dataclass(frozen=True)
class DirectDataset:
    """``POST /histories/{id}/contents`` answered with the dataset itself."""
    dataset_id: str
    dataset_name: str


@dataclass(frozen=True)
class ToolOutputs:
    """The upload went through the upload tool; the dataset is its first output."""
    dataset_id: str
    dataset_name: str
    n_outputs: int


UploadShape = Union[DirectDataset, ToolOutputs]


def parse_upload_response(result: Any, fallback_name: str) -> UploadShape:
    if isinstance(result, dict):
        if result.get("id"):
            return DirectDataset(str(result["id"]), result.get("name") or fallback_name)

        outputs = result.get("outputs")
        if isinstance(outputs, list) and outputs:
            first = outputs[0]
            if isinstance(first, dict) and first.get("id"):
                return ToolOutputs(str(first["id"]), first.get("name") or fallback_name, len(outputs))

    raise UnrecognizedUploadResponse(result)


# ---------------------------------------------------------
# Ordered candidate resolution
# ---------------------------------------------------------
@dataclass
class Resolution:
    candidate: str
    result: Any
    attempts: List[str] = field(default_factory=list)


async def resolve_candidates(candidates: Sequence[str],
                             attempt: Callable[[str], Awaitable[Any]]) -> Resolution:
    """Try ``attempt`` on each candidate in order and keep the first success.

    Only ``GalaxyError`` counts as a rejected candidate; anything else is a bug
    and propagates immediately. Raises ``AllToolCandidatesFailed`` carrying the
    last error once the list is exhausted.
    """
    attempts: List[str] = []
    last_error: Optional[GalaxyError] = None

    for candidate in candidates:
        attempts.append(candidate)
        logger.info("Trying tool id: %s", candidate)
        try:
            result = await attempt(candidate)
        except GalaxyError as e:
            logger.warning("Tool id %s failed: %s", candidate, e)
            last_error = e
            continue
        return Resolution(candidate=candidate, result=result, attempts=attempts)

    raise AllToolCandidatesFailed(last_error, attempts)


def first_job_id(result: Any) -> Optional[str]:
    jobs = result.get("jobs") if isinstance(result, dict) else None
    if not jobs or not isinstance(jobs[0], dict) or not jobs[0].get("id"):
        return None
    return str(jobs[0]["id"])


def is_terminal(state: Optional[str]) -> bool:
    return state in TERMINAL_STATES
