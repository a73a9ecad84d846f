# Codeship services - build status API
from .client import CodeshipClient

__all__ = ["CodeshipClient"]
