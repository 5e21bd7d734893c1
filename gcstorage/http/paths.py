"""Resource URL construction."""

from urllib.parse import quote


def encode_segment(value: object) -> str:
    """Percent-encode a single path segment.

    Every reserved character is encoded, ``/`` included, so object names such as ``a/b c.txt``
    travel as one segment and come back unchanged.
    """
    return quote(str(value), safe="")


def url_for(root: str, *segments: object) -> str:
    """Join the root URL and the percent-encoded segments.

    Examples:
        >>> url_for("https://storage.example/v1", "b", "my-bucket", "o", "dir/file #1.txt")
        'https://storage.example/v1/b/my-bucket/o/dir%2Ffile%20%231.txt'

    """
    return "/".join([root.rstrip("/"), *(encode_segment(segment) for segment in segments)])
