"""Markup rendering for the toolpath surface."""

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from gcad_preview.config import CANVAS_ID, NONCE_ALPHABET, NONCE_LENGTH, PreviewSettings
from gcad_preview.host.interface import RenderingSurface
from gcad_preview.logger import Logger
from gcad_preview.security import SecurityContext, build_context

TEMPLATES_DIR = Path(__file__).parent / "templates"
PANEL_TEMPLATE = "panel.html.jinja2"


class PanelRenderer:
    """Renders surface markup with a freshly generated security context."""

    def __init__(
        self,
        settings: PreviewSettings,
        logger: Logger,
        templates_dir: Optional[str] = None,
        nonce_length: int = NONCE_LENGTH,
        nonce_alphabet: str = NONCE_ALPHABET,
    ):
        """
        Initialize the renderer.

        Args:
            settings: Preview settings (locates the script and stylesheet artifacts)
            logger: Logger instance
            templates_dir: Directory holding ``panel.html.jinja2`` (uses the packaged one if None)
            nonce_length: Number of symbols per nonce
            nonce_alphabet: Symbols nonces are drawn from
        """
        self.settings = settings
        self.logger = logger
        self.nonce_length = nonce_length
        self.nonce_alphabet = nonce_alphabet
        self._jinja_env = Environment(
            loader=FileSystemLoader(templates_dir or str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html", "xml", "jinja2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, surface: RenderingSurface, title: str) -> tuple[str, SecurityContext]:
        """
        Render the surface markup.

        A new :class:`SecurityContext` is built on every call.

        Args:
            surface: Surface whose origin and URI translation are used
            title: Document title

        Returns:
            Tuple of (markup, security context embedded in it)
        """
        security = build_context(surface.csp_source, self.nonce_length, self.nonce_alphabet)
        template = self._jinja_env.get_template(PANEL_TEMPLATE)
        html = template.render(
            title=title,
            security=security,
            script_uri=surface.as_surface_uri(self.settings.script_path),
            style_uri=surface.as_surface_uri(self.settings.style_path),
            canvas_id=CANVAS_ID,
        )
        self.logger.debug("Rendered surface markup", view_type=surface.view_type, bytes=len(html))
        return html, security
