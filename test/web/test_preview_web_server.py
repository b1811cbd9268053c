"""Tests for the browser-backed host and its web server."""

import asyncio
import time

import pytest
from fastapi import WebSocketDisconnect
from fastapi.websockets import WebSocketState
from fastapi.testclient import TestClient

from gcad_preview.config import CANVAS_ID, SHOW_COMMAND
from gcad_preview.exceptions import SurfaceConstructionError, ValidationError
from gcad_preview.extension import activate
from gcad_preview.host import SurfaceOptions, ViewColumn
from gcad_preview.web_server import GcadPreviewWebServer, WebHost

ORIGIN = "http://testserver"
DOCUMENT_URI = "file:///work/bracket.gcad"


def wait_for(predicate, timeout: float = 2.0) -> bool:
    """Poll ``predicate`` while the server's event loop runs in its own thread."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def build_server(settings, logger, supports_revival=True):
    host = WebHost(
        origin=ORIGIN,
        extension_root=settings.extension_root,
        logger=logger,
        supports_revival=supports_revival,
    )
    controller = activate(host, settings=settings, logger=logger)
    return host, controller, GcadPreviewWebServer(host, logger=logger)


@pytest.fixture
def web_host(settings, console_logger):
    host, controller, server = build_server(settings, console_logger)
    with TestClient(server.app) as client:
        yield host, client
    controller.deactivate()
    host.close()


@pytest.fixture
def client(web_host):
    return web_host[1]


@pytest.fixture
def host(web_host):
    return web_host[0]


def focus(client, text="cutter_diameter(6.35mm);", language_id="gcad"):
    response = client.post(
        "/documents/focus",
        json={"uri": DOCUMENT_URI, "language_id": language_id, "text": text},
    )
    assert response.status_code == 200
    return response


class TestEditorEndpoints:
    def test_ping(self, client):
        response = client.get("/ping")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "gcad-preview"

    def test_focus_tracks_active_document(self, client, host):
        data = focus(client).json()["data"]

        assert data["uri"] == DOCUMENT_URI
        assert data["language_id"] == "gcad"
        assert host.active_document().get_text() == "cutter_diameter(6.35mm);"

    def test_change_unknown_document_is_404(self, client):
        response = client.post(
            "/documents/change", json={"uri": "file:///nowhere.gcad", "text": "x"}
        )
        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "DOCUMENT_NOT_FOUND"

    def test_change_bumps_version(self, client):
        focus(client)
        response = client.post("/documents/change", json={"uri": DOCUMENT_URI, "text": "G0;"})

        assert response.status_code == 200
        assert response.json()["data"]["version"] == 2

    def test_unknown_command_is_404(self, client):
        response = client.post("/commands/gcad.unknown")
        assert response.status_code == 404
        assert response.json()["detail"]["error_code"] == "COMMAND_NOT_FOUND"


class TestPanelEndpoints:
    def test_show_command_opens_one_surface(self, client, host):
        assert client.post(f"/commands/{SHOW_COMMAND}").status_code == 200
        surface = host.surface
        assert client.post(f"/commands/{SHOW_COMMAND}").status_code == 200

        assert host.surface is surface
        assert surface.reveal_count == 1

    def test_panel_markup(self, client):
        client.post(f"/commands/{SHOW_COMMAND}")

        response = client.get("/panel")

        assert response.status_code == 200
        html = response.text
        assert f'<canvas id="{CANVAS_ID}"></canvas>' in html
        assert f'src="{ORIGIN}/assets/dist/app.js"' in html
        assert f'href="{ORIGIN}/assets/dist/app.css"' in html
        assert "Content-Security-Policy" in html

    def test_panel_load_revives_session(self, client, host):
        """Loading the page with no live surface revives the preview."""
        assert host.surface is None

        response = client.get("/panel", params={"state": "restored"})

        assert response.status_code == 200
        assert host.surface is not None
        assert host.surface.html == response.text

    def test_panel_without_revival_is_404(self, settings, console_logger):
        host, controller, server = build_server(settings, console_logger, supports_revival=False)
        with TestClient(server.app) as client:
            response = client.get("/panel")
        controller.deactivate()

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "NO_ACTIVE_SURFACE"

    def test_assets_are_served(self, client):
        response = client.get("/assets/dist/app.js")
        assert response.status_code == 200
        assert "export" in response.text

    def test_missing_asset_is_404(self, client):
        assert client.get("/assets/dist/missing.js").status_code == 404


class TestChannel:
    def test_channel_without_surface_is_rejected(self, client):
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect("/channel") as websocket:
                websocket.receive_json()

    def test_debounced_payload_reaches_page(self, client, host):
        """Edits made before the page connects are delivered, coalesced, on connect."""
        focus(client, text="")
        client.post(f"/commands/{SHOW_COMMAND}")
        for text in ["c", "cu", "cutter_diameter(6.35mm);"]:
            client.post("/documents/change", json={"uri": DOCUMENT_URI, "text": text})

        assert wait_for(lambda: host.surface.pending_messages == 1)

        with client.websocket_connect("/channel") as websocket:
            assert websocket.receive_json() == "cutter_diameter(6.35mm);"

    def test_error_report_becomes_notification(self, client, host):
        client.post(f"/commands/{SHOW_COMMAND}")

        with client.websocket_connect("/channel") as websocket:
            websocket.send_json({"status": "rendered"})
            websocket.send_json({"error": "Division by zero at line 4"})
            assert wait_for(lambda: len(host.notifications) == 1)

            notifications = client.get("/notifications").json()["data"]

        assert notifications == ["Division by zero at line 4"]

    def test_binary_frame_is_ignored(self, client, host):
        """A binary frame is dropped and the channel keeps delivering reports."""
        client.post(f"/commands/{SHOW_COMMAND}")
        surface = host.surface

        with client.websocket_connect("/channel") as websocket:
            websocket.send_bytes(b"\x00\x01")
            websocket.send_json({"error": "Unknown tool at line 2"})
            assert wait_for(lambda: len(host.notifications) == 1)

            assert not surface.disposed
            assert host.surface is surface

        assert host.notifications == ["Unknown tool at line 2"]

    def test_second_connection_is_rejected(self, client):
        client.post(f"/commands/{SHOW_COMMAND}")

        with client.websocket_connect("/channel"):
            with pytest.raises(WebSocketDisconnect):
                with client.websocket_connect("/channel") as second:
                    second.receive_json()

    def test_closing_page_disposes_session(self, client, host):
        client.post(f"/commands/{SHOW_COMMAND}")
        surface = host.surface

        with client.websocket_connect("/channel"):
            assert wait_for(lambda: surface.connected)

        assert wait_for(lambda: surface.disposed)
        assert host.surface is None

        # The next show command builds a fresh surface
        client.post(f"/commands/{SHOW_COMMAND}")
        assert host.surface is not None
        assert host.surface is not surface


class TestWebHost:
    def test_asset_uri_inside_root(self, settings, console_logger):
        host = WebHost(ORIGIN, settings.extension_root, console_logger)
        assert host.asset_uri(settings.script_path) == f"{ORIGIN}/assets/dist/app.js"

    def test_asset_uri_outside_root_rejected(self, settings, console_logger, tmp_path):
        host = WebHost(ORIGIN, settings.extension_root, console_logger)
        with pytest.raises(ValidationError):
            host.asset_uri(tmp_path / "secret.txt")

    def test_resolve_asset_blocks_traversal(self, settings, console_logger, tmp_path):
        (tmp_path / "secret.txt").write_text("x", encoding="utf-8")
        host = WebHost(ORIGIN, settings.extension_root, console_logger)

        assert host.resolve_asset("../secret.txt") is None
        assert host.resolve_asset("dist/app.css") is not None

    def test_closed_host_refuses_surfaces(self, settings, console_logger):
        host = WebHost(ORIGIN, settings.extension_root, console_logger)
        host.close()

        with pytest.raises(SurfaceConstructionError):
            host.create_surface("toolpath", "Toolpaths", ViewColumn.ONE, True, SurfaceOptions())


class BrokenPipeWebSocket:
    """WebSocket whose sends fail, as when the page vanished mid-write."""

    def __init__(self):
        self.client_state = WebSocketState.CONNECTING
        self.send_attempts = 0

    async def accept(self):
        self.client_state = WebSocketState.CONNECTED

    async def send_json(self, data):
        self.send_attempts += 1
        raise RuntimeError("connection lost")

    async def close(self, code: int = 1000):
        self.client_state = WebSocketState.DISCONNECTED

    async def receive(self):
        await asyncio.sleep(0.05)
        return {"type": "websocket.disconnect", "code": 1006}


class TestWebSurfaceServe:
    @pytest.mark.asyncio
    async def test_failed_send_is_collected_on_disconnect(self, settings, console_logger):
        host = WebHost(ORIGIN, settings.extension_root, console_logger)
        surface = host.create_surface(
            "toolpath", "Toolpaths", ViewColumn.ONE, True, SurfaceOptions()
        )
        surface.post_message("cutter_diameter(6.35mm);")
        websocket = BrokenPipeWebSocket()

        await surface.serve(websocket)

        assert websocket.send_attempts == 1
        assert surface.disposed
        assert not surface.connected
        drains = [t for t in asyncio.all_tasks() if t.get_coro().__name__ == "_drain"]
        assert drains == []
