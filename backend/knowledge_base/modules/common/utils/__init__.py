from .error_handler import handle_exception, map_exception, register_exception_handlers

__all__ = ["handle_exception", "map_exception", "register_exception_handlers"]
