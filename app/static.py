"""Static site serving with single-page-app fallback."""

from __future__ import annotations

import os

from starlette.exceptions import HTTPException
from starlette.responses import FileResponse, Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="static")

DEFAULT_EXTENSION = ".html"


class SinglePageStaticFiles(StaticFiles):
    """
    StaticFiles that behaves like a client-side-routing host.

    - ``/about`` is served from ``about.html`` when no ``about`` file exists.
    - Any path that still matches nothing gets the entry document with 200.
    - Every response carries the same Cache-Control value.
    """

    def __init__(self, *, directory: str | os.PathLike, index_document: str = "index.html",
                 cache_control: str = "public, max-age=3600", **kwargs) -> None:
        super().__init__(directory=directory, html=True, **kwargs)
        self.index_document = index_document
        self.cache_control = cache_control

    async def get_response(self, path: str, scope: Scope) -> Response:
        response = await self._lookup(path, scope)
        if response is None and path and not path.endswith(DEFAULT_EXTENSION):
            response = await self._lookup(path.rstrip("/") + DEFAULT_EXTENSION, scope)
        if response is None:
            logger.debug("No static match; serving entry document", extra={"path": path})
            response = FileResponse(os.path.join(self.directory, self.index_document))
        response.headers["Cache-Control"] = self.cache_control
        return response

    async def _lookup(self, path: str, scope: Scope) -> Response | None:
        """Return the parent's response, or None when it would be a 404."""
        try:
            response = await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code == 404:
                return None
            raise
        if response.status_code == 404:
            return None
        return response
