"""FastAPI application entry - AI Blog Writer."""

import logging
from pathlib import Path

from . import config
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from .api.routes import router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_INDEX_HTML = Path(__file__).resolve().parent / "web" / "index.html"

app = FastAPI(
    title="AI Blog Writer",
    description="Turn a topic into a rendered blog post",
    version="0.1.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


@app.get("/", response_class=HTMLResponse)
async def root():
    return HTMLResponse(_INDEX_HTML.read_text(encoding="utf-8"))


# For running directly: python -m blog_writer.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
