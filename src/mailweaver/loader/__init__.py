from mailweaver.loader.fetch import FetchResponse, Fetcher, FileFetcher, HttpFetcher, create_fetcher
from mailweaver.loader.scripts import ScriptRegistry
from mailweaver.loader.styles import StylesheetLoader

__all__ = [
    "FetchResponse",
    "Fetcher",
    "FileFetcher",
    "HttpFetcher",
    "create_fetcher",
    "ScriptRegistry",
    "StylesheetLoader",
]
