from .resolver import CascadeResolver

__all__ = ["CascadeResolver"]
