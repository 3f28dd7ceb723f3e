"""Signed-in viewer routers."""

from .me import router as me_router

__all__ = ["me_router"]
