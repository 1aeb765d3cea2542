"""File-extension to code-fence language resolution."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class LanguageHandler:
    """How snippets from one kind of source file are rendered.

    Attributes:
        markdown: Language tag placed on the code fence; empty when unknown.
        comment: Renders a single comment line (newline included) in the
            language's syntax, or an empty string when the language has no
            comments.
    """

    markdown: str
    comment: Callable[[str], str]


def _line_comment(prefix: str) -> Callable[[str], str]:
    def render(text: str) -> str:
        return f"{prefix} {text}\n"

    return render


def _no_comment(text: str) -> str:
    return ""


_SLASH = _line_comment("//")
_HASH = _line_comment("#")

SUPPORTED_LANGUAGE_EXTENSIONS: MappingProxyType[str, LanguageHandler] = MappingProxyType(
    {
        ".js": LanguageHandler("javascript", _SLASH),
        ".ts": LanguageHandler("typescript", _SLASH),
        ".py": LanguageHandler("python", _HASH),
        ".sh": LanguageHandler("bash", _HASH),
        ".json": LanguageHandler("json", _no_comment),
        ".yaml": LanguageHandler("yaml", _HASH),
        ".yml": LanguageHandler("yaml", _HASH),
        ".tf": LanguageHandler("terraform", _HASH),
        ".hcl": LanguageHandler("hcl", _HASH),
        ".tfstacks.hcl": LanguageHandler("hcl", _HASH),
        ".go": LanguageHandler("go", _SLASH),
        ".cs": LanguageHandler("csharp", _SLASH),
        ".csproj": LanguageHandler("xml", _SLASH),
        ".runsettings": LanguageHandler("xml", _SLASH),
    }
)

DEFAULT_LANGUAGE = LanguageHandler("", _SLASH)

# Longest suffix first so compound extensions win over their tails
_SUFFIXES_BY_LENGTH = sorted(SUPPORTED_LANGUAGE_EXTENSIONS, key=len, reverse=True)


def match_extension(path: str) -> str | None:
    """Return the longest known extension that ends the final path segment.

    Args:
        path: Source path, with or without leading directories.

    Returns:
        str | None: Matching table key, or None when nothing matches.

    Examples:
        match_extension("stacks/main.tfstacks.hcl")  # ".tfstacks.hcl"
        match_extension("Makefile")  # None
    """
    filename = path.rsplit("/", 1)[-1]
    for suffix in _SUFFIXES_BY_LENGTH:
        if filename.endswith(suffix):
            return suffix
    return None


def resolve_language(path: str) -> LanguageHandler:
    """Look up the language handler for a source path.

    Unknown extensions fall back to `DEFAULT_LANGUAGE`: an empty tag and
    ``//`` comments.

    Examples:
        resolve_language("src/index.ts").markdown  # "typescript"
    """
    suffix = match_extension(path)
    if suffix is None:
        return DEFAULT_LANGUAGE
    return SUPPORTED_LANGUAGE_EXTENSIONS[suffix]
