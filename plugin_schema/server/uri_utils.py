#!/usr/bin/env python3

"""URI utility functions."""

from urllib.parse import urlparse
from urllib.request import url2pathname


def uri_to_path(uri: str) -> str:
    """File system path of a document URI.

    ``file://host/share/x`` keeps its host as a UNC-style prefix; URIs of
    other schemes (``untitled:``) map to their raw path, which never matches
    a plugin document name.
    """
    parsed = urlparse(uri)
    path = url2pathname(parsed.path)
    if parsed.scheme == "file" and parsed.netloc:
        return f"//{parsed.netloc}{path}"
    return path
