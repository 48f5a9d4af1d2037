from fastapi import FastAPI
from controller.notes_controller import notes_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(notes_router)
