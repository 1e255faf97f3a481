from .base import Order, QueryStore, StoreError  # noqa: F401
from .sqlmodel_store import SQLModelStore  # noqa: F401
