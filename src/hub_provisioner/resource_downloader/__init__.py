"""
Resource downloader.

This package handles:
1. Shallow-cloning model repositories with git
2. Downloading single files over HTTP(S), following redirects
3. Running fetch plans in order and recording their outcomes
"""

from .byte_downloader import ByteStreamDownloader
from .downloader import ResourceDownloader
from .repository_fetcher import GitCloner, RepositoryCloner

__all__ = ["ByteStreamDownloader", "GitCloner", "RepositoryCloner", "ResourceDownloader"]
