"""
View rendering.

Controllers hand a view name and its data to a renderer. The default renderer
serves JSON for the single-page frontend.
"""

from typing import Any, Dict

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class JSONViewRenderer:
    """Render views as ``{"view": name, **context}`` JSON documents."""

    def render(self, request: Request, view: str, context: Dict[str, Any]) -> JSONResponse:
        return JSONResponse(content=jsonable_encoder({"view": view, **context}))
