from urllib.parse import urlparse

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from papeleo.api.exception_handlers import register_exception_handlers
from papeleo.api.v1.router import api_router
from papeleo.core.config import settings
from papeleo.core.logging import configure_logging

configure_logging(settings.log_level)

app = FastAPI(title="Papeleo contractual")

if settings.frontend_url:
    parsed = urlparse(settings.frontend_url)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
def health():
    return {"status": "ok"}
