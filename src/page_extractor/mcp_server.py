"""MCP server exposing the extraction pipeline as a tool.

Supports:
  - stdio (on-demand / local process, the default)
  - sse / streamable-http (remote server mode)

Tool ``extract`` renders the article as markdown-ish text blocks and
attaches ``{isReadable, contentLength, excerpt, url}`` as result metadata.
Failures come back as an error-flagged result with ``{error, url}``
metadata rather than as protocol errors.  Prompt ``extract-and-summarize``
asks the client model to summarise a URL.
"""

from __future__ import annotations

import argparse
import sys

import structlog
from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent

from page_extractor.config.settings import get_pipeline_config, get_settings
from page_extractor.core.logging_config import configure_logging
from page_extractor.scraper.pipeline import ExtractionPipeline, ExtractionResult

logger = structlog.get_logger(__name__)

SERVER_NAME = "Web Content Extractor"
TOOL_NAME = "extract"
PROMPT_NAME = "extract-and-summarize"


def render_result(result: ExtractionResult, url: str) -> CallToolResult:
    """Render a successful extraction as tool output."""
    blocks = [
        f"# {result.title}\n\n",
        f"Source: {result.site_name}\n" if result.site_name else "",
        f"Author: {result.byline}\n\n" if result.byline else "\n",
        "## Content\n\n" + result.text_content,
    ]
    return CallToolResult(
        content=[TextContent(type="text", text=text) for text in blocks if text],
        isError=False,
        _meta={
            "isReadable": result.is_readable,
            "contentLength": result.length,
            "excerpt": result.excerpt,
            "url": url,
        },
    )


def render_error(error: Exception, url: str) -> CallToolResult:
    """Render a failed extraction as an error-flagged tool result."""
    message = str(error) or "Unknown error"
    return CallToolResult(
        content=[TextContent(type="text", text=f"Error extracting content: {message}")],
        isError=True,
        _meta={"error": message, "url": url},
    )


async def run_extract_tool(pipeline: ExtractionPipeline, url: str) -> CallToolResult:
    """Run the pipeline for *url* and render the outcome."""
    logger.info("extraction_started", url=url)
    try:
        result = await pipeline.extract(url)
    except Exception as exc:  # noqa: BLE001
        logger.error("extraction_failed", url=url, error=str(exc))
        return render_error(exc, url)
    logger.debug(
        "extraction_result",
        title=result.title,
        content_length=result.length,
        is_readable=result.is_readable,
    )
    return render_result(result, url)


def summarize_prompt(url: str) -> str:
    return (
        f"Please extract and summarize the content from {url}. "
        "Focus on the main points and key information."
    )


def build_server(pipeline: ExtractionPipeline | None = None) -> FastMCP:
    """Create the FastMCP app with the ``extract`` tool and summary prompt.

    Args:
        pipeline: Pipeline used by the tool.  Built from the process-wide
            configuration when omitted.
    """
    pipeline = pipeline or ExtractionPipeline(get_pipeline_config())
    mcp = FastMCP(SERVER_NAME)

    @mcp.tool(
        name=TOOL_NAME,
        description="Extract the content from a given url",
        structured_output=False,
    )
    async def _extract(url: str) -> CallToolResult:
        return await run_extract_tool(pipeline, url)

    @mcp.prompt(
        name=PROMPT_NAME,
        description="Extract a web page and summarise its main points",
    )
    def _summarize(url: str) -> str:
        return summarize_prompt(url)

    return mcp


def main() -> int:
    parser = argparse.ArgumentParser(description="MCP web content extractor")
    parser.add_argument(
        "--transport",
        default="stdio",
        choices=["stdio", "sse", "streamable-http"],
    )
    args = parser.parse_args()

    # stdout carries the protocol stream under stdio.
    configure_logging(get_settings().log_level, stream=sys.stderr)

    server = build_server()
    logger.info("mcp_server_started", transport=args.transport)
    server.run(transport=args.transport)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
