"""Remote fact store client."""

from .client import FactStore, StoreError

__all__ = ["FactStore", "StoreError"]
