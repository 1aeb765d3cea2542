"""Replacement of marked GitHub links with the code they point at."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from dataclasses import replace

import httpx
from loguru import logger

from .config import SnippetConfig, build_config
from .constants import URL_PLACEHOLDER
from .exceptions import FetchError
from .extractor import extract_lines
from .fetcher import fetch_content, open_client
from .languages import LanguageHandler, resolve_language
from .locator import MatchRecord, locate_matches
from .models import SnippetOutcome, TransformContext, TransformState
from .nodes import Code, Node
from .reference import SnippetReference, parse_reference


def build_code_node(
    snippet: str, source_url: str, handler: LanguageHandler, origin_comment: str | None = None
) -> Code:
    """Create the code block that replaces a snippet link.

    Args:
        snippet: Extracted lines.
        source_url: Link target, substituted for ``<url>`` in `origin_comment`.
        handler: Language of the source file.
        origin_comment: Optional comment template placed above the snippet.

    Returns:
        Code: Node tagged with the handler's language.

    Examples:
        build_code_node("x = 1", url, resolve_language("a.py"), "From <url>")
    """
    value = snippet
    if origin_comment:
        value = handler.comment(origin_comment.replace(URL_PLACEHOLDER, source_url)) + snippet
    return Code(lang=handler.markdown, value=value)


def replace_match(match: MatchRecord, node: Node) -> None:
    """Swap the matched link for `node`, leaving sibling positions intact."""
    match.parent.children[match.index] = node


class SnippetInliner:
    """Inline every marked snippet link of a document tree.

    One instance drives one run: scanning and reference validation happen
    synchronously, fetches then run concurrently, and the tree is only mutated
    once all of them have settled.

    Args:
        config: Settings for the run; defaults when omitted.
        client: HTTP client to reuse. A client is created and closed by the
            run when omitted.
    """

    def __init__(
        self, config: SnippetConfig | None = None, client: httpx.AsyncClient | None = None
    ):
        self.config = config or SnippetConfig()
        self.client = client
        self.context = TransformContext()

    @property
    def state(self) -> TransformState:
        return self.context.state

    async def run(self, tree: Node) -> Node:
        """Transform `tree` in place and return it.

        Raises:
            MalformedReferenceError: If a marked link has no valid line range.
                Raised before any fetch starts; the tree is left untouched.
        """
        context = self.context
        context.state = TransformState.SCANNING
        scanned = self._scan(tree)
        context.matches = [replace(match, reference=reference) for match, reference in scanned]
        logger.debug(f"Found {len(context.matches)} snippet link(s)")

        if not context.matches:
            context.state = TransformState.DONE
            return tree

        context.state = TransformState.DISPATCHING
        semaphore = (
            asyncio.Semaphore(self.config.max_concurrency)
            if self.config.max_concurrency is not None
            else None
        )

        async with self._client() as client:
            tasks = [
                asyncio.create_task(self._pipeline(match, reference, client, semaphore))
                for match, reference in scanned
            ]
            context.state = TransformState.SETTLING
            # Siblings keep running to completion before the client closes
            results = await asyncio.gather(*tasks, return_exceptions=True)

        for result in results:
            if isinstance(result, BaseException):
                raise result

        for outcome in results:
            if outcome.code is not None:
                replace_match(outcome.match, outcome.code)
                context.replaced += 1
            elif outcome.error is not None:
                context.failed.append(outcome.error)

        context.state = TransformState.DONE
        logger.info(
            f"Inlined {context.replaced} snippet(s), {len(context.failed)} left as links"
        )
        return tree

    def _scan(self, tree: Node) -> list[tuple[MatchRecord, SnippetReference]]:
        # Every reference is validated before anything is fetched
        return [
            (match, parse_reference(match.source_url))
            for match in locate_matches(tree, self.config.inline_marker)
        ]

    @contextlib.asynccontextmanager
    async def _client(self):
        if self.client is not None:
            yield self.client
            return
        async with open_client(self.config) as client:
            yield client

    async def _pipeline(
        self,
        match: MatchRecord,
        reference: SnippetReference,
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore | None,
    ) -> SnippetOutcome:
        try:
            if semaphore is None:
                content = await fetch_content(reference.raw_url, client)
            else:
                async with semaphore:
                    content = await fetch_content(reference.raw_url, client)
        except FetchError as error:
            logger.warning(f"{error} (linked from {match.source_url})")
            self.config.report_error(error)
            return SnippetOutcome(match=match, error=error)

        snippet = extract_lines(content, reference.start_line, reference.end_line)
        code = build_code_node(
            snippet,
            match.source_url,
            resolve_language(reference.path),
            self.config.origin_comment,
        )
        return SnippetOutcome(match=match, code=code)


async def inline_snippets(
    tree: Node, config: SnippetConfig | None = None, client: httpx.AsyncClient | None = None
) -> Node:
    """Replace marked snippet links in `tree` with code blocks.

    Args:
        tree: Document tree, mutated in place.
        config: Settings for the run; defaults when omitted.
        client: Optional HTTP client to reuse.

    Returns:
        Node: The same tree.

    Raises:
        MalformedReferenceError: If a marked link has an invalid line range.

    Examples:
        tree = await inline_snippets(tree, SnippetConfig(origin_comment="From <url>"))
    """
    return await SnippetInliner(config, client).run(tree)


def inline_snippets_sync(tree: Node, config: SnippetConfig | None = None) -> Node:
    """Run `inline_snippets` to completion from synchronous code."""
    return asyncio.run(inline_snippets(tree, config))


def create_transformer(**options: object) -> Callable[[Node], Awaitable[Node]]:
    """Build a reusable transform from option overrides.

    The configuration is merged over the defaults and validated once; the
    returned coroutine function can then be applied to any number of trees.

    Raises:
        ConfigError: If an option is unknown or invalid.

    Examples:
        transform = create_transformer(inline_marker="snippet", on_error=print)
        await transform(tree)
    """
    config = build_config(**options)

    async def transform(tree: Node) -> Node:
        return await inline_snippets(tree, config)

    return transform
