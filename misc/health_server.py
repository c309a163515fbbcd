from __future__ import annotations

from aiohttp import web

from misc.bot_status import BotStatus
from misc.bot_status import utc_iso

STATUS_KEY = web.AppKey("bot_status", BotStatus)
SERVICE_KEY = web.AppKey("service_name", str)


async def handle_root(request: web.Request) -> web.Response:
    return web.json_response(
        {
            "status": "ok",
            "service": request.app[SERVICE_KEY],
            "timestamp": utc_iso(),
        }
    )


async def handle_health(request: web.Request) -> web.Response:
    status = request.app[STATUS_KEY]
    return web.json_response(
        {
            "status": "healthy" if status.ready else "starting",
            "bot": status.to_health_dict(),
            "timestamp": utc_iso(),
        }
    )


def build_health_app(status: BotStatus, *, service_name: str) -> web.Application:
    app = web.Application()
    app[STATUS_KEY] = status
    app[SERVICE_KEY] = service_name
    app.router.add_get("/", handle_root)
    app.router.add_get("/health", handle_health)
    return app


async def start_health_server(app: web.Application, *, host: str, port: int) -> web.AppRunner:
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    print(f"[HEALTH] listening on {host}:{port}")
    return runner
