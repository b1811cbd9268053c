"""gcad preview web server - HTTP/WebSocket front end for :class:`WebHost`.

Endpoints:
- GET /ping - Health check
- POST /documents/focus - Editor reports the focused document
- POST /documents/change - Editor reports new document text
- POST /commands/{command_id} - Invoke a registered command
- GET /panel - Current surface markup (revives a session after a reload)
- GET /assets/{path} - Script/stylesheet artifacts under the extension root
- WS /channel - Message channel of the rendering surface
- GET /notifications - Error notifications shown to the user
"""

from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, WebSocket, status
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from pydantic import BaseModel

from gcad_preview.config import VIEW_TYPE
from gcad_preview.exceptions import CommandNotFoundError, SurfaceConstructionError
from gcad_preview.logger import Logger, session_logger
from gcad_preview.web_server.host import WebHost


class FocusDocumentRequest(BaseModel):
    uri: str
    language_id: str
    text: str = ""


class ChangeDocumentRequest(BaseModel):
    uri: str
    text: str


class GcadPreviewWebServer:
    """FastAPI application exposing a :class:`WebHost` to an editor and a browser."""

    def __init__(self, host: WebHost, logger: Optional[Logger] = None):
        """
        Initialize the web server.

        Args:
            host: Web host the routes operate on
            logger: Logger instance (shared session logger if None)
        """
        self.host = host
        self.logger: Logger = logger or session_logger
        self.app = FastAPI(
            title="gcad-preview", description="Live toolpath preview for gcad documents"
        )
        self._setup_routes()

    def _setup_routes(self):
        """Set up all routes."""

        @self.app.get("/ping")
        async def ping():
            """
            Health check endpoint.

            Returns:
                {status: "ok", timestamp: ISO8601, service: "gcad-preview"}
            """
            current_time = datetime.now().isoformat()
            self.logger.debug("GET /ping", timestamp=current_time)
            return JSONResponse(
                content={"status": "ok", "timestamp": current_time, "service": "gcad-preview"}
            )

        # ====================================================================
        # EDITOR ENDPOINTS
        # ====================================================================

        @self.app.post("/documents/focus")
        async def focus_document(request: FocusDocumentRequest):
            """Record the document the editor currently has focused."""
            document = self.host.focus_document(request.uri, request.language_id, request.text)
            self.logger.info(
                "POST /documents/focus", uri=document.uri, language_id=document.language_id
            )
            return JSONResponse(
                content={
                    "status": "success",
                    "data": {
                        "uri": document.uri,
                        "language_id": document.language_id,
                        "version": document.version,
                    },
                }
            )

        @self.app.post("/documents/change")
        async def change_document(request: ChangeDocumentRequest):
            """Apply new text to a known document and notify listeners."""
            document = self.host.change_document(request.uri, request.text)
            if document is None:
                self.logger.warning("Unknown document changed", uri=request.uri, status=404)
                raise HTTPException(
                    status_code=404,
                    detail={
                        "error": "DOCUMENT_NOT_FOUND",
                        "message": f"Document '{request.uri}' has not been focused yet",
                    },
                )
            return JSONResponse(
                content={
                    "status": "success",
                    "data": {"uri": document.uri, "version": document.version},
                }
            )

        @self.app.post("/commands/{command_id}")
        async def execute_command(command_id: str):
            """Invoke a command registered by the extension."""
            self.logger.info("POST /commands/{id}", command_id=command_id)
            try:
                await self.host.execute_command(command_id)
            except CommandNotFoundError as e:
                raise HTTPException(status_code=404, detail=e.to_dict())
            except SurfaceConstructionError as e:
                self.logger.error("Command failed", command_id=command_id, error=str(e))
                raise HTTPException(status_code=409, detail=e.to_dict())
            return JSONResponse(content={"status": "success", "data": {"command": command_id}})

        @self.app.get("/notifications")
        async def list_notifications():
            """Error notifications surfaced so far, oldest first."""
            return JSONResponse(
                content={"status": "success", "data": list(self.host.notifications)}
            )

        # ====================================================================
        # SURFACE ENDPOINTS
        # ====================================================================

        @self.app.get("/panel", response_class=HTMLResponse)
        async def get_panel(state: Optional[str] = None):
            """Serve the surface markup, reviving a session when none is live."""
            surface = self.host.surface
            if surface is None and self.host.has_reviver(VIEW_TYPE):
                self.logger.info("Reviving surface for page load", has_state=state is not None)
                surface = await self.host.revive_surface(VIEW_TYPE, state)
            if surface is None:
                raise HTTPException(
                    status_code=404,
                    detail={
                        "error": "NO_ACTIVE_SURFACE",
                        "message": "No toolpath preview is open",
                    },
                )
            return HTMLResponse(content=surface.html)

        @self.app.get("/assets/{asset_path:path}")
        async def get_asset(asset_path: str):
            """Serve a build artifact from the extension root."""
            path = self.host.resolve_asset(asset_path)
            if path is None:
                raise HTTPException(
                    status_code=404,
                    detail={"error": "ASSET_NOT_FOUND", "message": f"Asset '{asset_path}' not found"},
                )
            return FileResponse(path)

        @self.app.websocket("/channel")
        async def channel(websocket: WebSocket):
            """Message channel for the surface page."""
            surface = self.host.surface
            if surface is None or surface.connected:
                self.logger.warning(
                    "Rejecting surface connection", has_surface=surface is not None
                )
                await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
                return
            await surface.serve(websocket)
