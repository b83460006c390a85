"""FastMCP server exposing the yamltools document operations as MCP tools.

Run via::

    yamltools-mcp                       # reads .env (default: stdio)
    MCP_TRANSPORT=http yamltools-mcp    # streamable HTTP on port 9000
    MCP_TRANSPORT=sse  yamltools-mcp    # legacy SSE on port 9000

Every tool is stateless: documents are passed in full on each call.
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from yamltools import __version__
from yamltools.language_reference import LANGUAGE_REFERENCE
from yamltools.models.errors import Diagnostic
from yamltools.models.nodes import Mapping, Node, Scalar, Sequence
from yamltools.service.document_service import DocumentError, DocumentService
from yamltools.settings import Settings

# ---------------------------------------------------------------------------
# Server + shared state
# ---------------------------------------------------------------------------

logger = logging.getLogger("yamltools.mcp")

mcp = FastMCP("yamltools")
_service: DocumentService = DocumentService()

_HINT = (
    "\n\nHint: call validate_document() to list every problem with line "
    "numbers, or language_reference() for the supported YAML subset.  "
    "Common mistakes:\n"
    "- a line without a colon at the top level\n"
    "- list items ('- x') with no parent key above them\n"
    "- 'key: value' lines nested under list items (sequences of mappings "
    "are not supported)"
)


def _tool_error(exc: DocumentError) -> ToolError:
    message = exc.message
    if exc.suggestion:
        message += f"\n{exc.suggestion}."
    return ToolError(message + _HINT)


def _describe(diagnostic: Diagnostic) -> str:
    where = f"line {diagnostic.line}" if diagnostic.line is not None else "document"
    if diagnostic.column is not None:
        where += f", col {diagnostic.column}"
    text = f"  [{diagnostic.kind}] {where}: {diagnostic.message}"
    if diagnostic.suggestion:
        text += f"  ({diagnostic.suggestion})"
    return text


def _outline(node: Node, level: int) -> list[str]:
    pad = "  " * level
    out: list[str] = []
    match node:
        case Mapping(entries=entries):
            for key, value in entries.items():
                match value:
                    case Mapping():
                        out.append(f"{pad}{key}: mapping ({len(value)} keys)")
                        out.extend(_outline(value, level + 1))
                    case Sequence():
                        out.append(f"{pad}{key}: sequence ({len(value)} items)")
                        out.extend(_outline(value, level + 1))
                    case Scalar():
                        out.append(f"{pad}{key}: {value.kind} = {value.value!r}")
        case Sequence(items=items):
            for i, item in enumerate(items):
                if isinstance(item, Scalar):
                    out.append(f"{pad}[{i}]: {item.kind} = {item.value!r}")
                else:
                    out.append(f"{pad}[{i}]: {type(item).__name__.lower()}")
                    out.extend(_outline(item, level + 1))
    return out


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


@mcp.resource("yamltools://reference")
def reference_resource() -> str:
    """Reference for the supported YAML subset."""
    return LANGUAGE_REFERENCE


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool
def language_reference() -> str:
    """Return the reference for the YAML subset these tools understand."""
    return LANGUAGE_REFERENCE


@mcp.tool
def validate_document(content: str) -> str:
    """Lint a YAML document and list errors and warnings with line numbers.

    Warnings (style and coercion risks) never make a document invalid.

    Args:
        content: YAML document text.
    """
    logger.info("validate_document called (yaml length=%d)", len(content))
    logger.debug("validate_document yaml:\n%s", content)
    report = _service.validate(content)
    stats = report.statistics

    lines = ["Document is valid." if report.is_valid else "Document has errors:"]
    lines.extend(_describe(e) for e in report.errors)
    if report.warnings:
        lines.append("Warnings:")
        lines.extend(_describe(w) for w in report.warnings)
    lines.append(
        f"Lines: {stats.total_lines} total, {stats.non_empty_lines} non-empty, "
        f"{stats.comment_lines} comments"
    )
    return "\n".join(lines)


@mcp.tool
def parse_document(content: str) -> str:
    """Parse a YAML document and show the inferred type of every value.

    Useful for checking how scalars are read (e.g. whether ``1.0`` became a
    float or ``"30"`` stayed a string).

    Args:
        content: YAML document text.
    """
    logger.info("parse_document called (yaml length=%d)", len(content))
    try:
        tree = _service.parse(content)
    except DocumentError as exc:
        raise _tool_error(exc) from exc
    lines = _outline(tree, 0)
    return "\n".join(lines) if lines else "Document is empty."


@mcp.tool
def format_document(content: str) -> str:
    """Re-emit a YAML document in canonical form (2-space indent, comments dropped).

    Args:
        content: YAML document text.
    """
    logger.info("format_document called (yaml length=%d)", len(content))
    try:
        return _service.format(content)
    except DocumentError as exc:
        raise _tool_error(exc) from exc


@mcp.tool
def convert_document(content: str) -> str:
    """Convert a YAML document to JSON text with a 2-space indent.

    Args:
        content: YAML document text.
    """
    logger.info("convert_document called (yaml length=%d)", len(content))
    try:
        return _service.convert(content)
    except DocumentError as exc:
        raise _tool_error(exc) from exc


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the MCP server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "yamltools MCP Server v%s starting (transport=%s, engine=%s)",
        __version__,
        settings.mcp_transport,
        settings.engine,
    )

    global _service  # noqa: PLW0603
    _service = DocumentService.from_settings(settings)

    if settings.mcp_transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(
            transport=settings.mcp_transport,
            host=settings.mcp_server_host,
            port=settings.mcp_server_port,
            log_level=settings.log_level.lower(),
        )


if __name__ == "__main__":
    main()
