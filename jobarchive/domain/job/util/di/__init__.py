from .provider import JobProvider

__all__ = ["JobProvider"]
