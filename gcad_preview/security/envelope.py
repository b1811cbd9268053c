"""Per-render sandbox for the rendering surface.

Each render gets a fresh nonce and a Content-Security-Policy that only lets
nonce-tagged scripts run. The nonce keeps unrelated injected markup from
executing. Nonces come from the non-cryptographic ``random`` module.
"""

import random
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gcad_preview.config import NONCE_ALPHABET, NONCE_LENGTH

_rng = random.Random()


class SecurityContext(BaseModel):
    """Nonce and matching policy for exactly one render of the surface markup."""

    model_config = ConfigDict(frozen=True)

    nonce: str = Field(min_length=1)
    policy: str


def generate_nonce(length: int = NONCE_LENGTH, alphabet: str = NONCE_ALPHABET) -> str:
    """Draw ``length`` independent uniform symbols from ``alphabet``."""
    if length <= 0:
        raise ValueError("Nonce length must be positive")
    if not alphabet:
        raise ValueError("Nonce alphabet cannot be empty")
    return "".join(_rng.choice(alphabet) for _ in range(length))


def build_policy(nonce: str, surface_origin: str) -> str:
    """Build the Content-Security-Policy for one render.

    Everything is denied by default. Fetches are allowed broadly so the
    preview module can load sibling assets; scripts need the nonce (plus
    ``unsafe-eval`` for the preview module's runtime); styles are restricted
    to the surface's own origin.
    """
    directives = [
        "default-src 'none'",
        f"connect-src {surface_origin} https: http: data: blob:",
        f"style-src {surface_origin}",
        f"img-src {surface_origin} https:",
        f"script-src 'nonce-{nonce}' 'unsafe-eval'",
    ]
    return "; ".join(directives) + ";"


def build_context(
    surface_origin: str,
    nonce_length: int = NONCE_LENGTH,
    alphabet: Optional[str] = None,
) -> SecurityContext:
    """Create a brand new :class:`SecurityContext`; never cache the result."""
    nonce = generate_nonce(nonce_length, alphabet or NONCE_ALPHABET)
    return SecurityContext(nonce=nonce, policy=build_policy(nonce, surface_origin))
