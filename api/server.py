"""FastAPI server for the try-on studio.

Holds one wizard session in process and exposes each user action:
- person and garment uploads (multipart files)
- garment generation from a text description
- try-on confirmation, retry, reset and stage navigation
- history restore and result download
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel

from tryon_studio import __version__
from tryon_studio.config import configure_logging, load_config
from tryon_studio.errors import ReadError
from tryon_studio.models import EncodedImage, HistoryEntry, WizardStage
from tryon_studio.pipeline import TryOnStudio
from tryon_studio.utils import encode_bytes


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Release the model client on shutdown
    if _studio is not None:
        await _studio.aclose()


app = FastAPI(
    title="Try-On Studio API",
    description="Virtual try-on wizard using a Gemini image model",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class GarmentPromptRequest(BaseModel):
    """Request body for garment generation."""
    prompt: str


class GarmentSelectRequest(BaseModel):
    """Pick a generated garment by index, or the uploaded one."""
    index: int | None = None
    uploaded: bool = False


class NavigateRequest(BaseModel):
    stage: WizardStage


class HistoryItem(BaseModel):
    person_image: str
    garment_image: str
    result_image: str
    timestamp: float

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryItem":
        return cls(
            person_image=entry.person_image.uri,
            garment_image=entry.garment_image.uri,
            result_image=entry.result_image.uri,
            timestamp=entry.timestamp.timestamp(),
        )


class StateResponse(BaseModel):
    """Everything the wizard UI renders."""
    stage: WizardStage
    generating: bool
    person_image: str | None = None
    garment_image: str | None = None
    result_image: str | None = None
    uploaded_garment: str | None = None
    generated_garments: list[str] = []
    garment_candidates: list[str] = []
    history: list[HistoryItem] = []
    last_failure: str | None = None
    notices: list[str] = []


# Initialize studio (will be done on first request)
_studio: TryOnStudio | None = None


def get_studio() -> TryOnStudio:
    """Get or create the studio session."""
    global _studio
    if _studio is None:
        config = load_config()  # Loads from .env automatically via pydantic-settings
        configure_logging(config.log_level)
        _studio = TryOnStudio(config)
    return _studio


def _uri(image: EncodedImage | None) -> str | None:
    return image.uri if image is not None else None


def build_state_response(studio: TryOnStudio) -> StateResponse:
    state = studio.state
    return StateResponse(
        stage=state.stage,
        generating=state.in_flight,
        person_image=_uri(state.selection.person_image),
        garment_image=_uri(state.selection.garment_image),
        result_image=_uri(state.selection.result_image),
        uploaded_garment=_uri(state.pool.uploaded),
        generated_garments=[image.uri for image in state.pool.generated],
        garment_candidates=[image.uri for image in state.pool.candidates],
        history=[HistoryItem.from_entry(entry) for entry in studio.history],
        last_failure=state.last_failure,
        notices=studio.drain_notices(),
    )


async def _read_upload(file: UploadFile) -> EncodedImage:
    try:
        raw = await file.read()
        return encode_bytes(raw, filename=file.filename, content_type=file.content_type)
    except (ReadError, OSError) as e:
        logger.error("Error reading file: %s", e)
        raise HTTPException(status_code=400, detail=f"Could not read image: {e}")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Try-On Studio API", "version": __version__}


@app.get("/health")
async def health():
    """Detailed health check."""
    studio = get_studio()
    check = getattr(studio.client, "check_connection", None)
    model_ok = await check() if check is not None else False

    return {
        "status": "ok" if model_ok else "degraded",
        "model": "connected" if model_ok else "disconnected",
    }


@app.get("/api/state", response_model=StateResponse)
async def get_state():
    return build_state_response(get_studio())


@app.post("/api/person", response_model=StateResponse)
async def upload_person(file: UploadFile = File(...)):
    """Upload the portrait; moves the wizard to the garment stage."""
    studio = get_studio()
    studio.upload_person(await _read_upload(file))
    return build_state_response(studio)


@app.post("/api/garment/upload", response_model=StateResponse)
async def upload_garment(file: UploadFile = File(...)):
    studio = get_studio()
    studio.upload_garment(await _read_upload(file))
    return build_state_response(studio)


@app.post("/api/garment/generate", response_model=StateResponse)
async def generate_garment(request: GarmentPromptRequest):
    """Generate a garment from a description and select it.

    Dropped silently while another generation is running.
    """
    studio = get_studio()
    await studio.generate_garment(request.prompt)
    return build_state_response(studio)


@app.post("/api/garment/select", response_model=StateResponse)
async def select_garment(request: GarmentSelectRequest):
    studio = get_studio()
    pool = studio.state.pool

    if request.uploaded:
        if pool.uploaded is None:
            raise HTTPException(status_code=404, detail="No uploaded garment")
        image = pool.uploaded
    else:
        if request.index is None or not 0 <= request.index < len(pool.generated):
            raise HTTPException(status_code=404, detail="No garment at that index")
        image = pool.generated[request.index]

    studio.select_garment(image)
    return build_state_response(studio)


@app.post("/api/tryon", response_model=StateResponse)
async def confirm_try_on():
    """Confirm the garment and render the try-on result."""
    studio = get_studio()
    await studio.confirm_garment()
    return build_state_response(studio)


@app.post("/api/retry-garment", response_model=StateResponse)
async def retry_garment():
    studio = get_studio()
    studio.retry_garment()
    return build_state_response(studio)


@app.post("/api/reset", response_model=StateResponse)
async def reset():
    studio = get_studio()
    studio.reset()
    return build_state_response(studio)


@app.post("/api/navigate", response_model=StateResponse)
async def navigate(request: NavigateRequest):
    studio = get_studio()
    studio.navigate(request.stage)
    return build_state_response(studio)


@app.post("/api/history/{index}/restore", response_model=StateResponse)
async def restore_history(index: int):
    studio = get_studio()
    try:
        studio.restore_history(index)
    except IndexError:
        raise HTTPException(status_code=404, detail="No history entry at that index")
    return build_state_response(studio)


@app.get("/api/result/download")
async def download_result():
    """Current result image as a file download."""
    export = get_studio().export_result()
    if export is None:
        raise HTTPException(status_code=404, detail="No result to download")

    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
