import logging

from fastapi import FastAPI

from notevault import config
from notevault.api import auth, collaborators, folders, notes

logging.basicConfig(level=config.LOG_LEVEL)

app = FastAPI(title="Notevault API")

app.include_router(auth.router)
app.include_router(notes.router)
app.include_router(collaborators.router)
app.include_router(folders.router)


@app.get("/health")
def health():
    return {"ok": True}
