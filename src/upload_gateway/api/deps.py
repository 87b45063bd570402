"""FastAPI dependencies resolving app-scoped collaborators."""

from fastapi import HTTPException, Request, status

from upload_gateway.pipeline import UploadPipeline
from upload_gateway.remote_sync import RemoteSync


def get_pipeline(endpoint: str, request: Request) -> UploadPipeline:
    pipeline = request.app.state.pipelines.get(endpoint)
    if pipeline is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Upload endpoint not found",
        )
    return pipeline


def get_remote_sync(request: Request) -> RemoteSync:
    return request.app.state.remote_sync
