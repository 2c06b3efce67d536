"""
WikiBot Server

FastAPI server answering Slack questions from the Notion wiki.

Endpoints:
- POST /slack/events: Slack Events API (app mentions)
- POST /slack/commands: Slack slash command (/wiki)
- POST /: URL verification challenge
- GET /health: Health check

Pipeline:
1. Receive and verify the Slack request
2. Acknowledge immediately (Slack expects a reply within 3 seconds)
3. In the background: search Notion, flatten pages, synthesize with the LLM
4. Post the answer back to Slack
"""

import json
import logging
import os
import sys
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, HTTPException, Header, BackgroundTasks
from fastapi.responses import JSONResponse, Response

from ..common.config import load_config, validate_config, WikiBotConfig
from ..common.messages import get_messages
from ..retriever.pipeline import WikiAnswerer
from .handlers import SlackHandler, Question
from .slack_client import SlackClient, SlackError

logger = logging.getLogger("wikibot.bot.server")

THINKING_REACTION = "thinking_face"


# Global state
config: Optional[WikiBotConfig] = None
slack_handler: Optional[SlackHandler] = None
slack_client: Optional[SlackClient] = None
answerer: Optional[WikiAnswerer] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize components on startup"""
    global config, slack_handler, slack_client, answerer

    logger.info("Starting up...")

    config = load_config()
    slack_handler = SlackHandler(signing_secret=config.slack.signing_secret)
    slack_client = SlackClient(bot_token=config.slack.bot_token)
    answerer = WikiAnswerer.from_config(config)

    if not config.slack.signing_secret:
        logger.warning("SLACK_SIGNING_SECRET is not set, request signatures are NOT verified")

    scope = config.notion.database_id or "all shared pages"
    logger.info(
        "Ready (provider: %s, model: %s, scope: %s, command: %s)",
        config.llm.provider, config.llm.model, scope, config.slack.slash_command,
    )

    yield

    logger.info("Shutting down...")
    await slack_client.aclose()
    await answerer.aclose()


app = FastAPI(
    title="WikiBot",
    description="Answers Slack questions from the Notion wiki",
    version="0.1.0",
    lifespan=lifespan
)


def _messages():
    return get_messages(config.retriever.language if config else "en")


# =============================================================================
# Background Tasks
# =============================================================================

async def handle_mention(question: Question):
    """Answer an @mention in its thread, with a reaction while working"""
    if question.is_empty:
        await _post_safely(question.channel, _messages()["mention_usage"], question.timestamp)
        return

    if question.timestamp:
        await slack_client.add_reaction(question.channel, question.timestamp, THINKING_REACTION)

    try:
        logger.info('[app_mention] Query: "%s"', question.query)
        answer = await answerer.answer(question.query)
        await slack_client.post_message(question.channel, answer, thread_ts=question.reply_thread)
    except Exception:
        logger.exception("[app_mention] Error answering query")
        await _post_safely(question.channel, _messages()["error"], question.timestamp)
    finally:
        if question.timestamp:
            await slack_client.remove_reaction(question.channel, question.timestamp, THINKING_REACTION)


async def handle_command(question: Question):
    """Answer a slash command in the channel it was issued in"""
    try:
        logger.info('[command] Query: "%s" (user: %s)', question.query, question.user_name or question.user)
        answer = await answerer.answer(question.query)
        header = _messages()["asked"].format(user_id=question.user, query=question.query)
        await slack_client.post_message(question.channel, f"{header}\n\n{answer}")
    except Exception:
        logger.exception("[command] Error answering query")
        if question.response_url:
            try:
                await slack_client.respond(question.response_url, _messages()["error"])
            except SlackError as e:
                logger.error("[command] Could not send error response: %s", e)


async def _post_safely(channel: str, text: str, thread_ts: Optional[str]) -> None:
    try:
        await slack_client.post_message(channel, text, thread_ts=thread_ts)
    except SlackError as e:
        logger.error("Could not post message to %s: %s", channel, e)


# =============================================================================
# Endpoints
# =============================================================================

def _verify(body: bytes, signature: Optional[str], timestamp: Optional[str]) -> None:
    if not slack_handler:
        raise HTTPException(status_code=503, detail="Handler not initialized")
    if not slack_handler.verify_signature(body, signature or "", timestamp or ""):
        raise HTTPException(status_code=401, detail="Invalid signature")


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "wikibot",
        "initialized": answerer is not None,
        "scoped": bool(config and config.notion.database_id),
    }


@app.post("/")
async def root_challenge(request: Request):
    """Answer Slack's URL verification when the root URL is configured"""
    try:
        data = json.loads(await request.body())
    except json.JSONDecodeError:
        data = {}
    if isinstance(data, dict) and data.get("type") == "url_verification":
        return JSONResponse({"challenge": data.get("challenge")})
    return Response(content="OK", media_type="text/plain")


@app.post("/slack/events")
async def slack_events(
    request: Request,
    background_tasks: BackgroundTasks,
    x_slack_signature: Optional[str] = Header(None),
    x_slack_request_timestamp: Optional[str] = Header(None),
    x_slack_retry_num: Optional[str] = Header(None),
):
    """
    Handle Slack Events API callbacks.

    URL verification is answered before the signature check so the
    endpoint can be registered before the secret is configured.
    """
    body = await request.body()

    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid JSON")
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Invalid event payload")

    if slack_handler and slack_handler.is_url_verification(data):
        return JSONResponse({"challenge": slack_handler.get_challenge(data)})

    _verify(body, x_slack_signature, x_slack_request_timestamp)

    # Slack redelivers events it considers unacknowledged; the first delivery is being answered
    if x_slack_retry_num:
        return JSONResponse({"ok": True})

    question = slack_handler.parse_event(data)
    if question:
        background_tasks.add_task(handle_mention, question)

    return JSONResponse({"ok": True})


@app.post("/slack/commands")
async def slack_commands(
    request: Request,
    background_tasks: BackgroundTasks,
    x_slack_signature: Optional[str] = Header(None),
    x_slack_request_timestamp: Optional[str] = Header(None),
):
    """Handle the slash command; the answer is posted to the channel later"""
    body = await request.body()
    _verify(body, x_slack_signature, x_slack_request_timestamp)

    question = slack_handler.parse_command(body)
    if question is None:
        raise HTTPException(status_code=400, detail="Invalid slash command payload")

    if question.is_empty:
        command = config.slack.slash_command if config else "/wiki"
        return JSONResponse({
            "response_type": "ephemeral",
            "text": _messages()["command_usage"].format(command=command),
        })

    background_tasks.add_task(handle_command, question)
    return Response(status_code=200)


# =============================================================================
# CLI Entry Point
# =============================================================================

def run_server():
    """Run the WikiBot server"""
    import uvicorn
    from dotenv import load_dotenv

    load_dotenv()

    logging.basicConfig(
        level=os.getenv("WIKIBOT_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    server_config = load_config()
    missing = validate_config(server_config)
    if missing:
        for name in missing:
            logger.error("Missing environment variable: %s", name)
        sys.exit(1)

    port = server_config.slack.port
    logger.info("Starting server on port %d", port)
    logger.info("Challenge endpoints: POST / and POST /slack/events")
    logger.info("Slash command endpoint: POST /slack/commands (%s)", server_config.slack.slash_command)

    uvicorn.run(
        "wikibot.bot.server:app",
        host="0.0.0.0",
        port=port,
        reload=False,
    )


if __name__ == "__main__":
    run_server()
