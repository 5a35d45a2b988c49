import pytest

from galaxy_errors import AllToolCandidatesFailed, RemoteApiError, UnrecognizedUploadResponse
from galaxy_utils import (
    AMRFINDER_TOOL_IDS,
    DirectDataset,
    ToolOutputs,
    build_amrfinder_payload,
    build_paste_payload,
    first_job_id,
    is_terminal,
    parse_upload_response,
    resolve_candidates,
)


def test_paste_payload_decodes_bytes_inline():
    payload = build_paste_payload(b">seq1\nACGT\n", "seq.fasta")
    assert payload == {
        "src": "pasted",
        "paste_content": ">seq1\nACGT\n",
        "name": "seq.fasta",
        "file_type": "auto",
        "dbkey": "?",
    }


def test_amrfinder_payload_lowercases_organism_and_fixes_flags():
    payload = build_amrfinder_payload("amrfinderplus", "ds1", "Escherichia", "hist1")
    assert payload == {
        "tool_id": "amrfinderplus",
        "history_id": "hist1",
        "inputs": {
            "nucleotide_input": {"src": "hda", "id": "ds1"},
            "organism": "escherichia",
            "report_all_equal": True,
            "plus": True,
            "name": True,
        },
    }


def test_direct_and_outputs_shapes_yield_same_dataset():
    direct = parse_upload_response({"id": "ds1", "name": "seq.fasta", "state": "queued"}, "x")
    wrapped = parse_upload_response({"outputs": [{"id": "ds1", "name": "seq.fasta"}], "jobs": []}, "x")

    assert isinstance(direct, DirectDataset)
    assert isinstance(wrapped, ToolOutputs)
    assert (direct.dataset_id, direct.dataset_name) == (wrapped.dataset_id, wrapped.dataset_name)


def test_direct_shape_falls_back_to_file_name():
    shape = parse_upload_response({"id": "ds9"}, "reads.fna")
    assert shape == DirectDataset("ds9", "reads.fna")


@pytest.mark.parametrize("response", [
    {},
    {"outputs": []},
    {"outputs": [{"name": "no id"}]},
    {"id": ""},
    [],
    "plain text",
    None,
])
def test_unrecognized_upload_shapes(response):
    with pytest.raises(UnrecognizedUploadResponse):
        parse_upload_response(response, "seq.fasta")


@pytest.mark.asyncio
async def test_resolve_stops_at_first_success():
    tried = []

    async def attempt(candidate):
        tried.append(candidate)
        if candidate in ("a", "b"):
            raise RemoteApiError(400, f"{candidate} not found")
        return {"ok": candidate}

    resolution = await resolve_candidates(["a", "b", "c", "d"], attempt)

    assert tried == ["a", "b", "c"]
    assert resolution.candidate == "c"
    assert resolution.result == {"ok": "c"}
    assert resolution.attempts == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_resolve_carries_last_error_when_all_fail():
    errors = {c: RemoteApiError(404, c) for c in ("a", "b", "c")}

    async def attempt(candidate):
        raise errors[candidate]

    with pytest.raises(AllToolCandidatesFailed) as exc_info:
        await resolve_candidates(["a", "b", "c"], attempt)

    assert exc_info.value.last_error is errors["c"]
    assert exc_info.value.attempts == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_resolve_with_no_candidates():
    async def attempt(candidate):
        raise AssertionError("should not be called")

    with pytest.raises(AllToolCandidatesFailed) as exc_info:
        await resolve_candidates([], attempt)
    assert exc_info.value.last_error is None


@pytest.mark.asyncio
async def test_resolve_does_not_swallow_unexpected_errors():
    async def attempt(candidate):
        raise KeyError("bug")

    with pytest.raises(KeyError):
        await resolve_candidates(["a", "b"], attempt)


def test_default_candidates_most_specific_first():
    assert AMRFINDER_TOOL_IDS[0].endswith("/3.11.26+galaxy0")
    assert "amrfinderplus" in AMRFINDER_TOOL_IDS


def test_first_job_id():
    assert first_job_id({"jobs": [{"id": "job42"}, {"id": "job43"}]}) == "job42"
    assert first_job_id({"jobs": []}) is None
    assert first_job_id({"outputs": []}) is None
    assert first_job_id("text") is None


def test_terminal_states():
    assert is_terminal("ok")
    assert is_terminal("error")
    assert not is_terminal("running")
    assert not is_terminal(None)
