from typing import AsyncIterator
import logging

import httpx
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, configure_logging

settings = Settings.from_env()
configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI()

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def get_settings() -> Settings:
    return settings


async def get_http_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.timeout) as client:
        yield client


async def forward(request: Request, url: str, client: httpx.AsyncClient) -> Response:
    """POST the incoming body to ``url`` and hand the upstream answer back as-is."""
    body = await request.body()
    try:
        upstream = await client.post(
            url,
            content=body,
            headers={"Content-Type": request.headers.get("content-type", "application/json")},
        )
    except httpx.HTTPError as e:
        logger.error("Upstream %s unreachable: %s", url, e)
        raise HTTPException(status_code=502, detail=f"Upstream service unavailable: {e}") from e

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.headers.get("content-type", "application/json"),
    )


# --- Execution service ---
@app.post("/api/send-data")
async def send_data(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await forward(request, settings.execution_url, client)


# --- Explanation service ---
@app.post("/api/explain")
async def explain(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await forward(request, settings.explanation_url, client)
