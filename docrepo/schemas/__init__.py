from .entity import Entity, resolve_collection_name

__all__ = [
    "Entity",
    "resolve_collection_name",
]
