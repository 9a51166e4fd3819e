"""Extract a collection id from an Outline collection URL."""

import re
from urllib.parse import urlparse

_ID_RE = re.compile(r"^[A-Za-z0-9]{8,}$")


def extract_collection_id(url: str) -> str:
    """Return the collection id from ``https://host/collection/<name>-<id>``.

    The id is the part of the slug after its last dash.

    Raises:
        ValueError: If the URL is not a collection URL or the id looks wrong.
    """
    parsed = urlparse(url.strip().rstrip("/"))
    if not parsed.scheme or not parsed.netloc:
        msg = f"Not a valid URL: {url!r}"
        raise ValueError(msg)

    parts = parsed.path.split("/")
    if "collection" not in parts:
        msg = "Not a collection URL, expected https://your-outline.com/collection/name-ID"
        raise ValueError(msg)

    index = parts.index("collection")
    slug = parts[index + 1] if index + 1 < len(parts) else ""
    if "-" not in slug:
        msg = f"Cannot find a collection id in {slug!r}, expected name-ID"
        raise ValueError(msg)

    collection_id = slug.rsplit("-", 1)[1]
    if not _ID_RE.match(collection_id):
        msg = f"Extracted id {collection_id!r} does not look like a collection id"
        raise ValueError(msg)
    return collection_id
