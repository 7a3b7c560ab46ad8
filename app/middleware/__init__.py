from app.middleware.error_handlers import add_error_handlers
from app.middleware.logging import install_request_logging

__all__ = ["add_error_handlers", "install_request_logging"]
