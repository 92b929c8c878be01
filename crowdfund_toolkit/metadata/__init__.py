from .fetcher import MetadataFetcher, resolve_image_url, resolve_url

__all__ = ["MetadataFetcher", "resolve_image_url", "resolve_url"]
