"""Source archive routes for the API."""

from __future__ import annotations

import base64
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from source_tree_viewer.api.dependencies import get_viewer_session
from source_tree_viewer.api.schemas.sources import (
    LeafActivationRequest,
    RenderNodeSchema,
    SelectionResponse,
    SourceTreeResponse,
    SourceUploadRequest,
)
from source_tree_viewer.models.tree import DirectoryNode
from source_tree_viewer.rendering import ExpansionState, render_tree
from source_tree_viewer.services.selection import ViewerPhase
from source_tree_viewer.services.session import NoArchiveLoadedError, ViewerSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/source", tags=["source"])

SessionDep = Annotated[ViewerSession, Depends(get_viewer_session)]


def _ready_tree(session: ViewerSession) -> DirectoryNode:
    if session.tree is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No source tree is loaded.",
        )
    return session.tree


async def _load(session: ViewerSession, zip_data: str) -> SelectionResponse:
    state = await session.load(zip_data)
    if state.phase is ViewerPhase.FAILED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": state.error, "kind": state.error_kind},
        )
    return SelectionResponse.from_state(state)


@router.post(
    "",
    response_model=SelectionResponse,
    summary="Load a source archive",
    description=(
        "Decode a base64 zip archive, rebuild its directory tree and pre-select "
        "the default file. Replaces any archive loaded before."
    ),
    responses={400: {"description": "Archive could not be decoded or is malformed"}},
)
async def load_source(request: SourceUploadRequest, session: SessionDep) -> SelectionResponse:
    return await _load(session, request.zip_data)


@router.post(
    "/upload",
    response_model=SelectionResponse,
    summary="Upload a source archive file",
    description="Multipart variant of the load endpoint for browser file pickers.",
    responses={400: {"description": "Archive could not be decoded or is malformed"}},
)
async def upload_source(
    file: Annotated[UploadFile, File(description="ZIP file to upload")],
    session: SessionDep,
) -> SelectionResponse:
    data = await file.read()
    logger.info("Received %s (%d bytes)", file.filename, len(data))
    return await _load(session, base64.b64encode(data).decode("ascii"))


@router.get(
    "/selection",
    response_model=SelectionResponse,
    summary="Get the previewed file",
)
def get_selection(session: SessionDep) -> SelectionResponse:
    return SelectionResponse.from_state(session.state)


@router.post(
    "/selection",
    response_model=SelectionResponse,
    summary="Preview a file",
    description="Select a file of the loaded tree; its already-decoded text becomes active.",
    responses={
        404: {"description": "File not found in the tree"},
        409: {"description": "No source tree is loaded"},
    },
)
async def activate_leaf(
    request: LeafActivationRequest, session: SessionDep
) -> SelectionResponse:
    try:
        state = session.activate_leaf(request.path)
    except NoArchiveLoadedError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No source tree is loaded.",
        ) from exc
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"File {request.path!r} not found.",
        ) from exc
    return SelectionResponse.from_state(state)


@router.get(
    "/tree",
    response_model=SourceTreeResponse,
    summary="Get the source tree",
    responses={409: {"description": "No source tree is loaded"}},
)
def get_tree(session: SessionDep) -> SourceTreeResponse:
    return SourceTreeResponse.from_root(_ready_tree(session))


@router.get(
    "/nodes",
    response_model=list[RenderNodeSchema],
    summary="Get the visible tree rows",
    description="Render the tree with only the root and the given directory ids expanded.",
    responses={409: {"description": "No source tree is loaded"}},
)
def get_nodes(
    session: SessionDep,
    expanded: Annotated[list[str] | None, Query(description="Expanded node ids")] = None,
) -> list[RenderNodeSchema]:
    root = _ready_tree(session)
    expansion = ExpansionState.from_ids(expanded or [])
    return [RenderNodeSchema.from_render_node(item) for item in render_tree(root, expansion)]
