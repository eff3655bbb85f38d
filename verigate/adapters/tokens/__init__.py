"""Token adapters - Bearer token signing."""

from .jose_jwt import JoseTokenCodec

__all__ = ["JoseTokenCodec"]
