import os
import uuid
import logging
from pathlib import Path
from fastapi import FastAPI, UploadFile, HTTPException, File, Depends, Request, BackgroundTasks
from fastapi.responses import Response, HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from .mashup import AppController, GenerationRequester, SessionStore, SlotRole, get_generator
from .mashup.sessions import DEFAULT_MAX_SESSIONS
from .mashup.clients import PROVIDERS
from .mashup.models import DOWNLOAD_FILENAME, Result, decode_data_url

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

SESSION_COOKIE = "mashup_session"
PROVIDER = os.getenv("MASHUP_PROVIDER", "gemini")

app = FastAPI(
    title="Character Product Mashup",
    description="Combine a character image and a product image with an AI image model",
    version="1.0.0"
)
sessions = SessionStore(int(os.getenv("MASHUP_MAX_SESSIONS", DEFAULT_MAX_SESSIONS)))

# Setup Templates
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


@app.middleware("http")
async def session_middleware(request: Request, call_next):
    """
    Attach a session id to every request, issuing a cookie on first visit.
    """
    session_id = request.cookies.get(SESSION_COOKIE)
    is_new = not session_id
    if is_new:
        session_id = uuid.uuid4().hex
    request.state.session_id = session_id

    response = await call_next(request)
    if is_new:
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


def get_requester() -> GenerationRequester:
    """
    Build the requester for the configured provider.
    """
    try:
        generator = get_generator(PROVIDER)
    except ValueError as e:
        logger.error(f"Generator error: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return GenerationRequester(generator)


async def get_controller(request: Request) -> AppController:
    """
    Return the controller for the caller's session.
    """
    # async so controller state is only touched on the event loop
    return sessions.get_or_create(
        request.state.session_id,
        lambda: AppController(get_requester())
    )


async def peek_controller(request: Request) -> AppController:
    """
    Return the session's controller without creating one.

    Unknown sessions get a throwaway empty controller that is not stored;
    only uploads create a stored controller.
    """
    controller = sessions.get(request.state.session_id)
    if controller is None:
        controller = AppController(requester=None)
    return controller


def redirect_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=303)


# =============================================================================
# Page
# =============================================================================

@app.get("/", response_class=HTMLResponse)
async def read_root(request: Request, controller: AppController = Depends(peek_controller)):
    """
    Serve the mashup page.
    """
    context = controller.render()
    context["download_filename"] = DOWNLOAD_FILENAME
    return templates.TemplateResponse(request, "index.html", context)


@app.post("/slots/{role}")
async def upload_slot_image(
    role: SlotRole,
    file: Optional[UploadFile] = File(None),
    controller: AppController = Depends(get_controller)
):
    """
    Put an image into the character or product slot.
    """
    if file is not None and file.filename:
        await controller.select(role, file)
    return redirect_home()


@app.post("/slots/{role}/remove")
async def remove_slot_image(role: SlotRole, controller: AppController = Depends(peek_controller)):
    """
    Clear the character or product slot.
    """
    controller.remove(role)
    return redirect_home()


@app.post("/generate")
async def generate(background_tasks: BackgroundTasks, controller: AppController = Depends(peek_controller)):
    """
    Start a generation in the background. The page shows Loading until it finishes.
    """
    if controller.begin():
        background_tasks.add_task(controller.run)
    else:
        logger.info("Generate ignored: missing image or generation in progress")
    return redirect_home()


@app.get("/result/download")
async def download_result(controller: AppController = Depends(peek_controller)):
    """
    Download the generated image.
    """
    state = controller.state
    if not isinstance(state, Result):
        raise HTTPException(status_code=404, detail="No generated image")

    try:
        media_type, content = decode_data_url(state.image)
    except ValueError as e:
        logger.error(f"Stored result is not a data URI: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{state.download_filename}"'}
    )


# =============================================================================
# JSON API
# =============================================================================

class ViewStateResponse(BaseModel):
    """Current view state of a session."""
    state: str = Field(description="One of: empty, loading, error, result")
    error: Optional[str] = None
    image: Optional[str] = Field(default=None, description="Generated image as a data URI")
    character: bool = Field(description="Whether the character slot holds an image")
    product: bool = Field(description="Whether the product slot holds an image")
    can_generate: bool

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "state": "empty",
            "error": None,
            "image": None,
            "character": True,
            "product": False,
            "can_generate": False
        }
    })


class GenerateResponse(ViewStateResponse):
    """Response from a generate call."""
    issued: bool = Field(description="Whether a request was sent to the generation service")


def view_state(controller: AppController) -> dict:
    state = controller.state
    return {
        "state": state.kind,
        "error": getattr(state, "message", None),
        "image": getattr(state, "image", None),
        "character": not controller.character.is_empty,
        "product": not controller.product.is_empty,
        "can_generate": controller.can_generate
    }


@app.get("/api/state", response_model=ViewStateResponse, tags=["API"])
async def get_state(controller: AppController = Depends(peek_controller)):
    return ViewStateResponse(**view_state(controller))


@app.post("/api/slots/{role}", response_model=ViewStateResponse, tags=["API"])
async def api_upload_slot_image(
    role: SlotRole,
    file: Optional[UploadFile] = File(None),
    controller: AppController = Depends(get_controller)
):
    """
    Put an image into a slot. An unreadable file leaves the slot empty.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")
    await controller.select(role, file)
    return ViewStateResponse(**view_state(controller))


@app.delete("/api/slots/{role}", response_model=ViewStateResponse, tags=["API"])
async def api_remove_slot_image(role: SlotRole, controller: AppController = Depends(peek_controller)):
    controller.remove(role)
    return ViewStateResponse(**view_state(controller))


@app.post("/api/generate", response_model=GenerateResponse, tags=["API"])
async def api_generate(controller: AppController = Depends(peek_controller)):
    """
    Generate a mashup and wait for the result.

    Does nothing when a slot is empty or a generation is already running.
    """
    issued = await controller.generate()
    return GenerateResponse(issued=issued, **view_state(controller))


@app.get("/providers", tags=["API"])
def list_providers():
    """
    List available AI providers and their configuration status.
    """
    providers = []
    for name, generator_cls in PROVIDERS.items():
        generator = generator_cls()
        providers.append({
            "name": name,
            "active": name == PROVIDER,
            "model": generator.model,
            "configured": generator.is_configured(),
            "required_env_vars": [generator_cls.ENV_API_KEY],
            "optional_env_vars": [
                f"{generator_cls.ENV_MODEL} (default: {generator_cls.DEFAULT_MODEL})",
                generator_cls.ENV_API_BASE,
                generator_cls.ENV_TIMEOUT
            ],
            "missing": generator.get_missing_config()
        })
    return {"providers": providers}


@app.get("/health")
def health():
    return {"status": "ok"}
