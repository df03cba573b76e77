"""Execution primitives shared by every command in the process."""

from .serializer import LogWriteSerializer, get_log_serializer, reset_log_serializer

__all__ = ["LogWriteSerializer", "get_log_serializer", "reset_log_serializer"]
