"""FastAPI application."""

from fastapi import FastAPI

from dictation.routes import credentials_router, sessions_router

app = FastAPI(title="Dictation Transcription API")
app.include_router(sessions_router)
app.include_router(credentials_router)
