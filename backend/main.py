from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Optional
import logging
import sqlite3

import database
from config import load_settings
from errors import TaskParseError
from models import ParsedTask, ParseRequest, Task, TaskCreate, TaskStats, TaskUpdate, TranscriptRequest, TranscriptTask
from parsing import parse_many, parse_one
from providers import LLMProvider, create_provider

logger = logging.getLogger(__name__)

PARSE_ERROR_MESSAGE = "Failed to parse natural language task. Please try rephrasing your input."
TRANSCRIPT_ERROR_MESSAGE = "Failed to process transcript"

settings = load_settings()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    runtime_settings = load_settings()
    configure_logging(runtime_settings.log_level)
    database.DATABASE_PATH = runtime_settings.database_path
    database.init_db()

    if not runtime_settings.api_key:
        # Startup continues; parse requests fail until the key is configured
        logger.warning("%s_API_KEY not set; parse requests will fail", runtime_settings.llm_provider.upper())

    app.state.settings = runtime_settings
    app.state.provider = create_provider(runtime_settings)
    logger.info("Using %s provider with model %s", runtime_settings.llm_provider, runtime_settings.model)
    yield
    # Shutdown (nothing to do)

app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_provider(request: Request) -> LLMProvider:
    return request.app.state.provider


def error_response(status_code: int, message: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def pipeline_error_response(request: Request, message: str, error: TaskParseError) -> JSONResponse:
    """Log the failure kind and detail; the client gets the fixed message plus the kind."""
    logger.error("%s [%s]: %s", message, error.kind.value, error.detail)
    content = {"error": message, "kind": error.kind.value}
    if not request.app.state.settings.is_production:
        content["details"] = error.detail
    return JSONResponse(status_code=500, content=content)


@app.exception_handler(sqlite3.Error)
async def database_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    details = None if request.app.state.settings.is_production else str(exc)
    return error_response(500, "Failed to save task", details)


@app.post("/api/tasks/parse")
async def parse_task(request: Request, body: ParseRequest,
                     provider: LLMProvider = Depends(get_provider)) -> ParsedTask:
    """Parse one natural-language sentence into a task preview (not persisted)."""
    if not body.input or not body.input.strip():
        return error_response(400, "Task input is required")

    try:
        return await parse_one(body.input, provider)
    except TaskParseError as e:
        return pipeline_error_response(request, PARSE_ERROR_MESSAGE, e)


@app.post("/api/tasks/parse-transcript")
async def parse_transcript(request: Request, body: TranscriptRequest,
                           provider: LLMProvider = Depends(get_provider)) -> list[TranscriptTask]:
    """Extract every task from a meeting transcript (not persisted)."""
    if not body.transcript or not body.transcript.strip():
        return error_response(400, "Transcript is required")

    try:
        return await parse_many(body.transcript, provider)
    except TaskParseError as e:
        return pipeline_error_response(request, TRANSCRIPT_ERROR_MESSAGE, e)


@app.get("/api/tasks")
def get_tasks(priority: Optional[str] = None, assignee: Optional[str] = None) -> list[Task]:
    return database.get_all_tasks(priority=priority, assignee=assignee)


@app.get("/api/tasks/assignees")
def get_assignees() -> list[str]:
    return database.get_assignees()


@app.get("/api/tasks/stats")
def get_stats() -> TaskStats:
    return TaskStats(**database.get_task_stats())


@app.post("/api/tasks", status_code=201)
def create_task(task_data: TaskCreate) -> Task:
    return database.create_task_db(task_data)


@app.post("/api/tasks/batch", status_code=201)
def create_tasks(tasks: list[TaskCreate]) -> list[Task]:
    """Commit confirmed transcript tasks; all are stored or none are."""
    created = database.create_tasks_db(tasks)
    logger.info("Created %d tasks in batch", len(created))
    return created


@app.patch("/api/tasks/{task_id}")
def update_task(task_id: int, task_data: TaskUpdate) -> Task:
    result = database.update_task_db(task_id, **task_data.model_dump(exclude_unset=True))
    if not result:
        raise HTTPException(status_code=404, detail="Task not found")
    return result


@app.delete("/api/tasks/{task_id}")
def delete_task(task_id: int) -> dict:
    if not database.delete_task_db(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"status": "deleted"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
