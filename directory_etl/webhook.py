"""
Ghost → Supabase article sync.

Ghost calls `POST /ghost-webhook` when a post is published or updated; the
post is reshaped into an `articles` row and upserted through the Supabase
REST API.
"""
import json
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from aiohttp import web
from loguru import logger

from directory_etl.clients import SupabaseClient
from directory_etl.clients import supabase_client
from directory_etl.config import DEFAULT_AUTHOR
from directory_etl.errors import WebhookPayloadError
from directory_etl.identifiers import uuid4_str
from directory_etl.models import Article, GhostPost

REQUIRED_FIELDS = ["id", "title", "html", "slug", "published_at"]

ID_FACTORY = web.AppKey("id_factory")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def parse_ghost_post(payload: Any) -> GhostPost:
    """
    Extract `post.current` from a Ghost webhook body.

    Raises:
        WebhookPayloadError: If there is no post or a required field is empty.
    """
    post = payload.get("post") if isinstance(payload, dict) else None
    current = post.get("current") if isinstance(post, dict) else None
    if not isinstance(current, dict) or not current:
        raise WebhookPayloadError("Invalid webhook payload: No post data received")

    missing = [name for name in REQUIRED_FIELDS if not current.get(name)]
    if missing:
        raise WebhookPayloadError(f"Invalid webhook payload: Missing required fields: {', '.join(missing)}")

    author = current.get("primary_author")
    return GhostPost(
        id=str(current["id"]),
        title=current["title"],
        html=current["html"],
        slug=current["slug"],
        published_at=current["published_at"],
        feature_image=current.get("feature_image"),
        excerpt=current.get("excerpt"),
        primary_author=author.get("name") if isinstance(author, dict) else None,
    )


def to_article(post: GhostPost, id_factory: Callable[[], str] = uuid4_str) -> Article:
    return Article(
        id=id_factory(),
        ghost_id=post.id,
        title=post.title,
        description=post.excerpt or "",
        author=post.primary_author or DEFAULT_AUTHOR,
        published_at=post.published_at,
        image_url=post.feature_image or "",
        html_content=post.html,
        slug=post.slug,
    )


def _json_response(body: Dict[str, Any], status: int) -> web.Response:
    return web.json_response(body, status=status, headers=CORS_HEADERS)


async def handle_options(request: web.Request) -> web.Response:
    return web.Response(text="ok", headers=CORS_HEADERS)


async def handle_ghost_webhook(request: web.Request) -> web.Response:
    start = time.perf_counter()
    debug_log: List[Dict[str, Any]] = []

    def add_debug_log(message: str, data: Any = None):
        timestamp = datetime.now(timezone.utc).isoformat()
        logger.debug(f"[{timestamp}] {message} {data if data is not None else ''}")
        debug_log.append({"timestamp": timestamp, "message": message, "data": data})

    def elapsed_ms() -> float:
        return round((time.perf_counter() - start) * 1000, 2)

    try:
        add_debug_log("Received webhook request", {"method": request.method})
        try:
            payload = await request.json()
        except json.JSONDecodeError as e:
            raise WebhookPayloadError(f"Invalid webhook payload: {e}") from e

        post = parse_ghost_post(payload)
        article = to_article(post, request.app[ID_FACTORY])
        add_debug_log("Transformed article data", {"id": article.id, "ghost_id": article.ghost_id})

        client = SupabaseClient()
        status, _ = await client.upsert_article(article)
        add_debug_log("Supabase API response", {"status": status})

        logger.info(f"Synced Ghost post {post.id} as article {article.id} in {elapsed_ms()}ms")
        return _json_response({
            "success": True,
            "message": "Article synced successfully",
            "articleId": article.id,
            "ghostId": article.ghost_id,
            "debug": debug_log,
            "duration": elapsed_ms(),
        }, status=200)
    except Exception as e:
        # Missing fields and non-JSON bodies are client errors too: 400, not 500
        add_debug_log("Error processing webhook", {"error": str(e)})
        logger.error(f"⚠️ Ghost webhook failed: {e}")
        return _json_response({
            "success": False,
            "error": str(e),
            "debug": debug_log,
            "duration": elapsed_ms(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }, status=400 if isinstance(e, WebhookPayloadError) else 500)


async def _close_client(app: web.Application):
    client = supabase_client.SupabaseClient._instance
    if client is not None and supabase_client.SupabaseClient._initialized:
        await client.close()


def create_app(id_factory: Callable[[], str] = uuid4_str) -> web.Application:
    app = web.Application()
    app[ID_FACTORY] = id_factory
    app.router.add_route("OPTIONS", "/ghost-webhook", handle_options)
    app.router.add_post("/ghost-webhook", handle_ghost_webhook)
    app.on_cleanup.append(_close_client)
    return app
