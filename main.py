from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from compat_scanner import __version__
from compat_scanner.builder import build_from_package, load_website
from compat_scanner.compatlist import CompatListService
from compat_scanner.config import PORT
from compat_scanner.errors import FetchError, MalformedPackageError
from compat_scanner.logger import get_logger
from compat_scanner.models import PackageRequest
from compat_scanner.orchestrator import analyze
from compat_scanner.registry import build_checks, collect_css_rules
from compat_scanner.report import (
    bad_request,
    internal_server_error,
    remote_error_response,
    send_results,
)

logger = get_logger(__name__)

compat_list = CompatListService()
CHECKS = build_checks(compat_list)
CSS_RULES = collect_css_rules(CHECKS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    compat_list.start()
    yield
    await compat_list.stop()


app = FastAPI(title="Compat Scanner", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.get("/")
async def scan(url: Optional[str] = None, user: Optional[str] = None, password: Optional[str] = None):
    if not url:
        raise HTTPException(status_code=400, detail="Missing url parameter")

    auth = (user, password) if user is not None and password is not None else None

    try:
        website = await load_website(url, auth=auth, css_rules=CSS_RULES)
    except FetchError as e:
        logger.info("Could not fetch %s: %s", url, e)
        return remote_error_response(e.status_code, str(e))

    try:
        report = await analyze(CHECKS, website)
    except Exception as e:
        logger.exception("Analysis of %s failed", website.url)
        return internal_server_error(e)
    finally:
        website.fetcher.close()

    return send_results(report)


@app.post("/package")
async def scan_package(request: Request):
    try:
        package = PackageRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        return bad_request()

    if not package.is_complete():
        return remote_error_response(400, "Missing information")

    try:
        website = await build_from_package(package, css_rules=CSS_RULES)
    except MalformedPackageError as e:
        logger.info("Rejected package: %s", e)
        return bad_request()

    try:
        # Stylesheets and scripts arrived with the package
        report = await analyze(CHECKS, website, resolve=None)
    except Exception as e:
        logger.exception("Analysis of package for %s failed", website.url)
        return internal_server_error(e)
    finally:
        website.fetcher.close()

    return send_results(report)


if __name__ == "__main__":
    logger.info("Server started on port %s", PORT)
    uvicorn.run(app, host="0.0.0.0", port=PORT)
