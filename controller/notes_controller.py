from typing import List
from fastapi import APIRouter, Depends, status
from model.api import (
    DeleteNoteRequest,
    IndexResponse,
    QueryIndexRequest,
    QueryNotesRequest,
    UpsertNoteRequest,
)
from model.note import Note
from service.notes_sync_service import NotesSyncManager
from util.constants import InternalURIs
from controller.controller_dependencies import (
    get_notes_sync_manager,
    rate_limit_dependencies,
)

notes_router = APIRouter(dependencies=rate_limit_dependencies())


@notes_router.post(InternalURIs.QUERY_NOTES, response_model=List[Note])
async def query_notes(
    payload: QueryNotesRequest,
    manager: NotesSyncManager = Depends(get_notes_sync_manager),
) -> List[Note]:
    return await manager.query_notes_for(payload.pageUrl, payload.requestingUser)


@notes_router.post(
    InternalURIs.UPSERT_NOTE,
    response_model=List[Note],
    status_code=status.HTTP_200_OK,
)
async def upsert_note(
    payload: UpsertNoteRequest,
    manager: NotesSyncManager = Depends(get_notes_sync_manager),
) -> List[Note]:
    stored = await manager.upsert_note(
        payload.to_note(),
        payload.target,
        payload.requestingUser,
        payload.accessToken,
    )
    return await manager.query_notes_for(
        stored.anchorData.pageUrl, payload.requestingUser
    )


@notes_router.post(InternalURIs.DELETE_NOTE, response_model=List[Note])
async def delete_note(
    payload: DeleteNoteRequest,
    manager: NotesSyncManager = Depends(get_notes_sync_manager),
) -> List[Note]:
    await manager.delete_note(
        payload.noteId,
        payload.pageUrl,
        payload.authorId,
        payload.requestingUser,
        payload.accessToken,
    )
    return await manager.query_notes_for(payload.pageUrl, payload.requestingUser)


@notes_router.post(InternalURIs.QUERY_INDEX, response_model=IndexResponse)
async def query_index(
    payload: QueryIndexRequest,
    manager: NotesSyncManager = Depends(get_notes_sync_manager),
) -> IndexResponse:
    index = await manager.query_index(payload.requestingUser)
    return IndexResponse(index=index.to_dto())
