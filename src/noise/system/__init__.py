from .path_resolver import PathResolver

__all__ = ["PathResolver"]
