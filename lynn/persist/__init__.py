from .text_format import dumps, load, loads, save

__all__ = ["dumps", "loads", "save", "load"]
