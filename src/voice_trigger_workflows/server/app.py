"""FastAPI app factory for the fulfillment backend.

The route is a thin wrapper: parse the JSON body, hand it to the configured
handler, return ``{retval, retmsg}``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import Body, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from voice_trigger_workflows import __version__
from voice_trigger_workflows.server.config import ServerSettings
from voice_trigger_workflows.server.handler import FulfillmentHandler, load_handler
from voice_trigger_workflows.widget.submission import FulfillmentResponse

logger = logging.getLogger(__name__)


def create_app(
    settings: ServerSettings | None = None, *, handler: FulfillmentHandler | None = None
) -> FastAPI:
    settings = settings or ServerSettings()
    fulfill = handler or load_handler(settings.fulfillment_handler)

    app = FastAPI(
        title="Voice Trigger Workflows",
        version=__version__,
        description="Fulfillment endpoint for the voice trigger workflows widget.",
    )
    app.state.settings = settings

    origins = settings.parsed_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentialed requests against a wildcard origin.
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/", response_model=FulfillmentResponse)
    def fulfill_action(payload: dict[str, Any] = Body(...)) -> Any:
        try:
            return fulfill(payload)
        except Exception as e:
            logger.exception(
                "Fulfillment handler failed",
                extra={"interaction_id": payload.get("interactionId")},
            )
            body = FulfillmentResponse(retval=-1, retmsg=str(e) or type(e).__name__)
            return JSONResponse(status_code=500, content=body.model_dump(mode="json"))

    _maybe_mount_public(app, settings.public_dir)
    return app


def _maybe_mount_public(app: FastAPI, public_dir: Path) -> None:
    if public_dir.is_dir():
        app.mount("/public", StaticFiles(directory=public_dir), name="public")
    else:
        logger.debug("No static directory", extra={"public_dir": str(public_dir)})
