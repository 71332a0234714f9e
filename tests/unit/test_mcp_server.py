"""Unit tests for the MCP front-end.

The pipeline is replaced by an ``AsyncMock``; rendering and error mapping
are tested directly, registration through the FastMCP app.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from page_extractor.core.exceptions import ClassifiedError, ErrorKind, PermanentNavigationError
from page_extractor.mcp_server import (
    PROMPT_NAME,
    TOOL_NAME,
    build_server,
    render_error,
    render_result,
    run_extract_tool,
)
from page_extractor.scraper.pipeline import ExtractionResult

_URL = "https://news.example.com/story"


def _result(**overrides) -> ExtractionResult:
    fields = dict(
        title="Headline",
        content="<p>Body text.</p>",
        text_content="Body text.",
        length=10,
        excerpt="Body text.",
        byline="Jane Doe",
        site_name="Example News",
        is_readable=True,
    )
    fields.update(overrides)
    return ExtractionResult(**fields)


def _texts(tool_result) -> list[str]:
    return [block.text for block in tool_result.content]


class TestRenderResult:
    def test_full_article_blocks(self) -> None:
        rendered = render_result(_result(), _URL)

        assert rendered.isError is False
        assert _texts(rendered) == [
            "# Headline\n\n",
            "Source: Example News\n",
            "Author: Jane Doe\n\n",
            "## Content\n\nBody text.",
        ]

    def test_missing_site_and_author(self) -> None:
        rendered = render_result(_result(byline=None, site_name=None, is_readable=False), _URL)

        assert _texts(rendered) == ["# Headline\n\n", "\n", "## Content\n\nBody text."]

    def test_metadata(self) -> None:
        rendered = render_result(_result(), _URL)

        assert rendered.meta == {
            "isReadable": True,
            "contentLength": 10,
            "excerpt": "Body text.",
            "url": _URL,
        }


class TestRenderError:
    def test_error_result(self) -> None:
        rendered = render_error(RuntimeError("boom"), _URL)

        assert rendered.isError is True
        assert _texts(rendered) == ["Error extracting content: boom"]
        assert rendered.meta == {"error": "boom", "url": _URL}

    def test_empty_message(self) -> None:
        rendered = render_error(RuntimeError(), _URL)
        assert rendered.meta["error"] == "Unknown error"


@pytest.mark.asyncio
class TestRunExtractTool:
    async def test_success(self) -> None:
        pipeline = MagicMock()
        pipeline.extract = AsyncMock(return_value=_result())

        rendered = await run_extract_tool(pipeline, _URL)

        pipeline.extract.assert_awaited_once_with(_URL)
        assert rendered.isError is False

    async def test_pipeline_errors_become_error_results(self) -> None:
        error = PermanentNavigationError(
            ClassifiedError(ErrorKind.PERMANENT, "net::ERR_NAME_NOT_RESOLVED")
        )
        pipeline = MagicMock()
        pipeline.extract = AsyncMock(side_effect=error)

        rendered = await run_extract_tool(pipeline, _URL)

        assert rendered.isError is True
        assert "net::ERR_NAME_NOT_RESOLVED" in _texts(rendered)[0]


@pytest.mark.asyncio
class TestBuildServer:
    async def test_registers_extract_tool(self) -> None:
        server = build_server(MagicMock())

        tools = {tool.name: tool for tool in await server.list_tools()}

        assert TOOL_NAME in tools
        assert tools[TOOL_NAME].description == "Extract the content from a given url"
        assert "url" in tools[TOOL_NAME].inputSchema["properties"]

    async def test_registers_summary_prompt(self) -> None:
        server = build_server(MagicMock())

        prompt = await server.get_prompt(PROMPT_NAME, {"url": _URL})

        assert prompt.messages[0].content.text == (
            f"Please extract and summarize the content from {_URL}. "
            "Focus on the main points and key information."
        )
