from aiohttp import web

from src.sitemap.application.gateway import CacheReadGateway

GATEWAY_KEY = web.AppKey("sitemap_gateway", CacheReadGateway)


async def _respond(request: web.Request, path: str) -> web.Response:
    gateway = request.app[GATEWAY_KEY]
    result = await gateway.serve(path)
    return web.Response(status=result.status, body=result.body, content_type=result.content_type)


async def sitemap_handler(request: web.Request) -> web.Response:
    return await _respond(request, "sitemap.xml")


async def sitemaps_handler(request: web.Request) -> web.Response:
    return await _respond(request, "sitemaps/" + request.match_info["tail"])


def create_app(gateway: CacheReadGateway) -> web.Application:
    app = web.Application()
    app[GATEWAY_KEY] = gateway
    app.router.add_get("/sitemap.xml", sitemap_handler)
    app.router.add_get("/sitemaps/{tail:.*}", sitemaps_handler)
    return app
