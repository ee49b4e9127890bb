# src/mr_trigger/main.py
import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from fastapi import FastAPI, BackgroundTasks, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ValidationError

from mr_trigger.config import Settings
from mr_trigger.models.webhook import MergeRequestEvent
from mr_trigger.platforms.gitlab import GitLabClient
from mr_trigger.relay.handler import WebhookHandler
from mr_trigger.relay.locks import CommitLocks


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

commit_locks = CommitLocks()


@lru_cache
def get_settings() -> Settings:
    return Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    logger.info(f"MR Trigger Relay starting for {settings.gitlab_url}...")
    yield
    logger.info("MR Trigger Relay shutting down...")


app = FastAPI(title="MR Trigger Relay", lifespan=lifespan)


class WebhookResponse(BaseModel):
    status: str
    message: str
    pipeline_id: int | None = None


def get_handler(settings: Settings) -> WebhookHandler:
    gitlab = GitLabClient(
        base_url=settings.gitlab_url,
        private_token=settings.private_token,
        timeout=settings.request_timeout,
    )
    locks = commit_locks if settings.serialize_commits else None
    return WebhookHandler(settings=settings, gitlab=gitlab, locks=locks)


def respond(status_code: int, status: str, message: str, pipeline_id: int | None = None) -> JSONResponse:
    body = WebhookResponse(status=status, message=message, pipeline_id=pipeline_id)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.get("/_ping", response_class=PlainTextResponse)
async def ping():
    return "healthy"


@app.post("/webhook.json", response_model=WebhookResponse)
async def webhook(request: Request, background_tasks: BackgroundTasks):
    settings = get_settings()

    try:
        body = await request.json()
    except ValueError as e:
        logger.info(f"[RESPONSE] 415 : undecodable body: {e}")
        return respond(415, "invalid", f"error decoding json body of request: {e}")

    try:
        event = MergeRequestEvent.model_validate(body)
    except ValidationError as e:
        logger.info(f"[RESPONSE] 400 : invalid payload ({e.error_count()} errors)")
        return respond(400, "invalid", f"invalid webhook payload: {e.error_count()} validation error(s)")

    outcome = await get_handler(settings).handle(event)
    for task in outcome.background:
        background_tasks.add_task(task)

    return respond(outcome.status_code, outcome.status, outcome.message, outcome.pipeline_id)
