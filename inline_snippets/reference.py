"""Parsing of GitHub blob URLs that carry a line-range fragment."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

from .constants import BLOB_SEGMENT, GITHUB_HOST, LINE_ANCHOR_PATTERN, RAW_CONTENT_HOST
from .exceptions import MalformedReferenceError


@dataclass(frozen=True)
class SnippetReference:
    """A resolved pointer to an inclusive line range of a hosted file.

    Attributes:
        source_url: Browsable blob URL as written in the document.
        raw_url: URL serving the unrendered file content.
        owner: Repository owner.
        repo: Repository name.
        ref: Branch, tag, or commit the URL points at.
        path: File path inside the repository.
        start_line: First line to include (1-based).
        end_line: Last line to include (1-based, inclusive).
    """

    source_url: str
    raw_url: str
    owner: str
    repo: str
    ref: str
    path: str
    start_line: int
    end_line: int


def parse_line_range(url: str, fragment: str) -> tuple[int, int]:
    """Parse an ``L<start>-L<end>`` fragment.

    Args:
        url: URL the fragment belongs to, used in error messages.
        fragment: Fragment without the leading ``#``.

    Returns:
        tuple[int, int]: Start and end line, both 1-based.

    Raises:
        MalformedReferenceError: If the fragment is missing, does not hold
            exactly two anchors, an anchor is not a positive integer, or the
            range is reversed.

    Examples:
        parse_line_range(url, "L8-L16")  # (8, 16)
    """
    if not fragment:
        raise MalformedReferenceError(url, "missing line-range fragment")

    anchors = fragment.split("-")
    if len(anchors) != 2:
        raise MalformedReferenceError(url, f"expected two line anchors, got {len(anchors)}")

    lines = []
    for anchor in anchors:
        match = LINE_ANCHOR_PATTERN.match(anchor)
        if match is None or int(match.group(1)) < 1:
            raise MalformedReferenceError(url, f"`{anchor}` is not a positive line anchor")
        lines.append(int(match.group(1)))

    start_line, end_line = lines
    if start_line > end_line:
        raise MalformedReferenceError(url, f"line range L{start_line}-L{end_line} is reversed")

    return start_line, end_line


def raw_content_url(url: str) -> str:
    """Derive the raw-content URL for a GitHub blob URL.

    The host is rewritten to the raw-content host and the ``blob`` path
    segment is removed. Query string and fragment are dropped.

    Raises:
        MalformedReferenceError: If the URL is not a GitHub blob URL.

    Examples:
        raw_content_url("https://github.com/o/r/blob/main/a.py#L1-L2")
        # "https://raw.githubusercontent.com/o/r/main/a.py"
    """
    owner, repo, ref, path = _split_blob_path(url)
    return urlunsplit(("https", RAW_CONTENT_HOST, f"/{owner}/{repo}/{ref}/{path}", "", ""))


def parse_reference(url: str) -> SnippetReference:
    """Parse a marked link target into a `SnippetReference`.

    Raises:
        MalformedReferenceError: If the URL is not a GitHub blob URL or its
            fragment is not a valid line range.

    Examples:
        parse_reference("https://github.com/o/r/blob/main/src/index.ts#L8-L16")
    """
    start_line, end_line = parse_line_range(url, urlsplit(url).fragment)
    owner, repo, ref, path = _split_blob_path(url)
    return SnippetReference(
        source_url=url,
        raw_url=raw_content_url(url),
        owner=owner,
        repo=repo,
        ref=ref,
        path=path,
        start_line=start_line,
        end_line=end_line,
    )


def _split_blob_path(url: str) -> tuple[str, str, str, str]:
    parts = urlsplit(url)
    if parts.netloc != GITHUB_HOST:
        raise MalformedReferenceError(url, f"host must be {GITHUB_HOST}")

    segments = parts.path.strip("/").split("/")
    # owner / repo / blob / ref / path...
    if len(segments) < 5 or segments[2] != BLOB_SEGMENT or not all(segments):
        raise MalformedReferenceError(url, "expected /<owner>/<repo>/blob/<ref>/<path>")

    owner, repo, _, ref, *path = segments
    return owner, repo, ref, "/".join(path)
