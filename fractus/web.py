"""
Fractus Web — JSON API server.

Exposes split, recover and info over HTTP, backed by fractus.sharing.
Shares travel as hex strings (recover and info also accept base64 or
JSON share text).
"""

import asyncio
import base64
import binascii
import logging

from aiohttp import web

from . import sharing
from .formats import parse_share

log = logging.getLogger(__name__)

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 8787


# ---------------------------------------------------------------------------
# API handlers
# ---------------------------------------------------------------------------

async def api_split(request: web.Request) -> web.Response:
    """
    POST /api/split
    Body JSON: { secret: str, n: int, k: int, secret_b64?: str, seed?: str }

    If secret_b64 is provided, it's decoded as raw bytes.
    Otherwise secret is treated as UTF-8 text.

    Returns: { ok, n, k, shares: [hex, ...] }
    """
    data, error = await _json_body(request)
    if error:
        return error

    n = data.get("n")
    k = data.get("k")
    secret_text = data.get("secret", "")
    secret_b64 = data.get("secret_b64")
    seed = data.get("seed")

    if n is None or k is None:
        return _err("Missing n or k", 400)

    try:
        n, k = int(n), int(k)
    except (ValueError, TypeError):
        return _err("n and k must be integers", 400)

    if seed is not None and not isinstance(seed, str):
        return _err("seed must be a hex string", 400)

    if secret_b64:
        try:
            secret = base64.b64decode(secret_b64, validate=True)
        except binascii.Error:
            return _err("Invalid base64 secret", 400)
    elif secret_text:
        secret = secret_text.encode("utf-8")
    else:
        return _err("No secret provided", 400)

    try:
        # Field arithmetic is pure Python; run it off the event loop
        shares = await asyncio.to_thread(sharing.split, secret, n=n, k=k, seed=seed)
    except ValueError as exc:
        return _err(str(exc), 400)

    return web.json_response({
        "ok": True,
        "n": n,
        "k": k,
        "shares": [s.to_hex() for s in shares],
    })


async def api_recover(request: web.Request) -> web.Response:
    """
    POST /api/recover
    Body JSON: { shares: [str, ...], k?: int }

    Returns: { ok, secret: str|null, secret_b64: str, secret_size: int }
    """
    data, error = await _json_body(request)
    if error:
        return error

    k = data.get("k")
    if k is not None:
        try:
            k = int(k)
        except (ValueError, TypeError):
            return _err("k must be an integer", 400)

    try:
        shares = _parse_shares(data.get("shares"))
        secret = await asyncio.to_thread(sharing.recover, shares, threshold=k)
    except ValueError as exc:
        return _err(f"Recovery failed: {exc}", 400)

    # Text when it decodes as UTF-8; base64 is always present
    try:
        secret_text = secret.decode("utf-8")
    except UnicodeDecodeError:
        secret_text = None

    return web.json_response({
        "ok": True,
        "secret": secret_text,
        "secret_b64": base64.b64encode(secret).decode("ascii"),
        "secret_size": len(secret),
    })


async def api_info(request: web.Request) -> web.Response:
    """
    POST /api/info
    Body JSON: { shares: [str, ...] }

    Returns the share-set report from fractus.sharing.inspect_shares.
    """
    data, error = await _json_body(request)
    if error:
        return error

    try:
        shares = _parse_shares(data.get("shares"))
    except ValueError as exc:
        return _err(str(exc), 400)

    result = sharing.inspect_shares(shares)
    result["ok"] = True
    return web.json_response(result)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _json_body(request: web.Request):
    try:
        data = await request.json()
    except ValueError:
        return None, _err("Invalid JSON body", 400)
    if not isinstance(data, dict):
        return None, _err("JSON body must be an object", 400)
    return data, None


def _parse_shares(raw) -> list:
    if not raw or not isinstance(raw, list):
        raise ValueError("No shares provided")
    if not all(isinstance(s, str) for s in raw):
        raise ValueError("Shares must be strings")
    return [parse_share(s) for s in raw]


def _err(msg: str, status: int = 400) -> web.Response:
    log.debug("Request rejected (%d): %s", status, msg)
    return web.json_response({"ok": False, "error": msg}, status=status)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app() -> web.Application:
    app = web.Application(client_max_size=1024 * 1024)  # 1 MB bodies

    app.router.add_post("/api/split", api_split)
    app.router.add_post("/api/recover", api_recover)
    app.router.add_post("/api/info", api_info)

    return app


def main(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT):
    logging.basicConfig(level=logging.INFO, format='%(message)s')
    log.info(f"Fractus API — http://{host}:{port}")
    web.run_app(create_app(), host=host, port=port)


if __name__ == "__main__":
    main()
