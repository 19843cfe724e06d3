from .builder import build_writer

__all__ = ["build_writer"]
