"""Upload endpoint: one file per request, answered with an id/link or an error."""

import logging

from fastapi import APIRouter, Depends, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from upload_gateway.api.deps import get_pipeline
from upload_gateway.models import UnexpectedError, UploadRequest
from upload_gateway.pipeline import WRITE_METHOD, UploadPipeline

logger = logging.getLogger(__name__)
router = APIRouter(tags=["uploads"])

CHUNK_SIZE = 64 * 1024


async def read_limited(item: UploadFile, max_size: int | None) -> UploadRequest:
    """Read the file in chunks, stopping as soon as ``max_size`` is passed.

    A truncated read is still longer than ``max_size``, so the validator
    rejects it as too big without the whole body being buffered.
    """
    chunks: list[bytes] = []
    total_size = 0
    while True:
        chunk = await item.read(CHUNK_SIZE)
        if not chunk:
            break
        chunks.append(chunk)
        total_size += len(chunk)
        if max_size is not None and total_size > max_size:
            logger.info("Stopped reading %s after %d bytes (limit %d)", item.filename, total_size, max_size)
            break
    return UploadRequest.from_bytes(item.filename, b"".join(chunks), item.content_type)


async def _read_upload(request: Request, pipeline: UploadPipeline) -> UploadRequest | None:
    """Pull the file under the endpoint's upload param out of the multipart body, if any."""
    form = await request.form()
    item = form.get(pipeline.config.upload_param)
    # Plain form values are strings; an empty filename means no file was chosen
    if item is None or isinstance(item, str) or not item.filename:
        return None
    return await read_limited(item, pipeline.max_upload_size)


@router.api_route(
    "/uploads/{endpoint}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
)
async def upload_file(
    request: Request,
    pipeline: UploadPipeline = Depends(get_pipeline),
) -> JSONResponse:
    upload = None
    if request.method == WRITE_METHOD:
        try:
            upload = await _read_upload(request, pipeline)
        except Exception as e:
            logger.exception("Failed to parse upload body")
            return JSONResponse(UnexpectedError(message=str(e)).to_payload())

    # Remote transfer blocks; keep it off the event loop
    outcome = await run_in_threadpool(pipeline.run, request.method, upload)
    return JSONResponse(outcome.to_payload())
