"""Interactive front end: fetch a page, select content, print the LLM analysis."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from .client import AnalysisClient
from .config import DEFAULT_USER_AGENT, AnalyzerConfig
from .dotenv import load_dotenv
from .errors import AnalyzerError, ConfigurationError, ContentNotFoundError, describe_error
from .models.analysis import PageContent
from .scraper import fetch_page, normalize_url

logger = logging.getLogger(__name__)

SNIPPET_CHARS = 500
SELECTOR_EXAMPLES = "'article', '.content-body', '#main-text'"


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="web-content-analyzer",
        description="Fetch a web page, select content with a CSS selector, and analyze it with Gemini.",
    )
    parser.add_argument("--url", help="Page URL (prompted when omitted)")
    parser.add_argument("--selector", help="CSS selector for the main content (prompted when omitted)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for diagnostics on stderr (default: WARNING)",
    )
    return parser.parse_args(argv)


def _print_error(prefix: str, exc: Exception) -> None:
    report = describe_error(exc)
    print(f"\n{prefix}: {report.error}", file=sys.stderr)
    print(f"Hint: {report.hint}", file=sys.stderr)


def _print_snippet(page: PageContent) -> None:
    print(f"Page title: {page.title}")
    print(f"Total characters in selected content: {len(page.content)}")
    if len(page.content) > SNIPPET_CHARS:
        print(f"Snippet of selected content:\n{page.content[:SNIPPET_CHARS]}...")
    else:
        print(f"Selected content:\n{page.content}")


async def _analyze(client: AnalysisClient, page: PageContent) -> None:
    """Run content analysis then snippet sentiment; one failing does not stop the other."""
    print("\nRequesting LLM analysis for the scraped content...")
    try:
        analysis = await client.analyze_web_content(page.title, page.content, page.url)
    except AnalyzerError as exc:
        _print_error("Error during LLM analysis", exc)
    else:
        print("\n--- LLM Content Analysis ---")
        print(f"URL: {page.url}")
        print(f"Page Title: {page.title}")
        print(f"\nSummary:\n{analysis.summary}")
        print(f"\nSentiment:\n{analysis.sentiment}")
        print(f"\nKey Topics:\n{analysis.key_topics}")
        print(f"\nCategory:\n{analysis.category}")
        print("--- End of Analysis ---")

    print("\nRequesting specific sentiment analysis for a snippet...")
    try:
        sentiment = await client.analyze_sentiment(page.content[:SNIPPET_CHARS])
    except AnalyzerError as exc:
        _print_error("Error during LLM sentiment analysis", exc)
    else:
        print("\n--- LLM Snippet Sentiment Analysis ---")
        print(f"Label: {sentiment.label.value}")
        print(f"Confidence: {sentiment.confidence:.2f}%")
        print(f"Explanation: {sentiment.explanation}")
        print("--- End of Snippet Sentiment Analysis ---")


async def run(url: str, selector: str) -> int:
    """Fetch, select, and analyze. Returns the process exit code."""
    print("Please wait...")
    print(f"Fetching URL: {url}")
    try:
        page = await fetch_page(
            url,
            selector,
            user_agent=os.getenv("SCRAPER_USER_AGENT", DEFAULT_USER_AGENT),
        )
    except ContentNotFoundError as exc:
        print(f"{exc}. Cannot perform LLM analysis on selected content")
        return 0
    except AnalyzerError as exc:
        _print_error("Failed to load page", exc)
        return 1

    print(f"Successfully fetched URL: {url}")
    _print_snippet(page)

    print("\nInitializing LLM client...")
    try:
        config = AnalyzerConfig.from_env(load_env_files=False)
    except ConfigurationError as exc:
        _print_error("Failed to initialize LLM client", exc)
        return 0

    async with AnalysisClient(config) as client:
        print(f"LLM client initialized ({config.model}).")
        await _analyze(client, page)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry-point for the ``web-content-analyzer`` console script."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # httpx logs full request URLs, which carry the API key.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    injected = load_dotenv()
    if injected:
        logger.info("Loaded %d var(s) from .env", len(injected))

    raw_url = args.url if args.url is not None else input("Enter the URL: ")
    url = normalize_url(raw_url)
    if not url:
        print("No URL provided. Exiting.")
        return 0
    if url != raw_url.strip():
        print(f"Auto-corrected URL: {url}")

    selector = (
        args.selector
        if args.selector is not None
        else input(f"Enter the CSS selector for the main content (e.g., {SELECTOR_EXAMPLES}): ")
    ).strip()
    if not selector:
        print("No content selector provided. Exiting.")
        return 0

    return asyncio.run(run(url, selector))


if __name__ == "__main__":
    sys.exit(main())
