"""Security envelope for the rendering surface."""

from gcad_preview.security.envelope import (
    SecurityContext,
    build_context,
    build_policy,
    generate_nonce,
)

__all__ = ["SecurityContext", "build_context", "build_policy", "generate_nonce"]
