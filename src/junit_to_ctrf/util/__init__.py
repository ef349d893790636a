from .console import err_console

__all__ = ["err_console"]
