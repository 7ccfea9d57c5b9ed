#!/usr/bin/env python3
"""
MARCspec LSP Server

Language Server Protocol implementation for MARCspec files, one spec per line.
Provides validation diagnostics and hover documentation of the decoded spec.

Format:
- Blank lines and lines starting with '#' are ignored
- Every other line is a MARCspec: 245$a{$b=\\x}
"""

import logging
from typing import List, Optional

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from marcspec import MAX_DEPTH, InvalidMARCspecError, MarcSpec

COMMENT_PREFIX = '#'


class MarcSpecLspServer(LanguageServer):
    """LSP Server for MARCspec files."""

    def __init__(self, max_depth: int = MAX_DEPTH):
        super().__init__("marcspec-lsp-server", "v0.1.0")
        self.max_depth = max_depth

    def parse(self, spec: str) -> MarcSpec:
        """Parse a spec with this server's nesting limit."""
        return MarcSpec(spec, max_depth=self.max_depth)


# Create server instance
server = MarcSpecLspServer()


def is_spec_line(line: str) -> bool:
    """Check if a line holds a MARCspec rather than a comment or nothing."""
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith(COMMENT_PREFIX)


def get_error_range(line: str, line_idx: int, error: InvalidMARCspecError) -> lsp.Range:
    """Range of the offending substring, or the whole line if it cannot be found."""
    start = line.find(error.spec) if error.spec else -1
    if start == -1:
        start, end = 0, len(line)
    else:
        end = start + len(error.spec)
    return lsp.Range(
        start=lsp.Position(line=line_idx, character=start),
        end=lsp.Position(line=line_idx, character=end)
    )


def validate_marcspec_document(document) -> List[lsp.Diagnostic]:
    """Validate MARCspec document and return diagnostics."""
    diagnostics = []
    lines = document.source.split('\n')

    for line_idx, line in enumerate(lines):
        if not is_spec_line(line):
            continue
        try:
            server.parse(line)
        except InvalidMARCspecError as e:
            diagnostics.append(lsp.Diagnostic(
                range=get_error_range(line, line_idx, e),
                severity=lsp.DiagnosticSeverity.Error,
                source="marcspec-lsp",
                message=str(e)
            ))

    logging.debug(f"Validated {len(lines)} lines, {len(diagnostics)} invalid")
    return diagnostics


def get_hover_info(spec: MarcSpec) -> str:
    """Generate Markdown documentation for a decoded MARCspec."""
    field = spec.get_field()
    info = f"**MARCspec:** `{spec}`\n\n"
    info += f"**Field:** `{field.get_base_spec()}`\n\n"

    if field.index is not None:
        info += f"- Index: `{field.index}`\n"
    if field.char_pos is not None:
        info += f"- Character position: `{field.char_pos}`\n"
    if field.indicators is not None:
        info += f"- Indicator 1: `{field.indicator1 or '_'}`, Indicator 2: `{field.indicator2 or '_'}`\n"
    if field.subspecs:
        info += f"- Subspecs: {len(field.subspecs)}\n"

    subfields = spec.get_subfields()
    if subfields:
        info += "\n**Subfields:**\n\n"
        for subfield in subfields:
            info += f"- `{subfield.get_base_spec()}`"
            if subfield.subspecs:
                info += f" with {len(subfield.subspecs)} subspec(s)"
            info += "\n"

    info += f"\n```json\n{spec.to_json(indent=2)}\n```"
    return info


@server.feature(lsp.TEXT_DOCUMENT_HOVER)
def hover(params: lsp.HoverParams) -> Optional[lsp.Hover]:
    """Provide hover documentation for the MARCspec under the cursor."""
    document = server.workspace.get_text_document(params.text_document.uri)
    lines = document.source.split('\n')

    line_idx = params.position.line
    if line_idx >= len(lines):
        return None

    line = lines[line_idx]
    if not is_spec_line(line):
        return None

    try:
        info = get_hover_info(server.parse(line))
    except InvalidMARCspecError as e:
        info = f"**Invalid MARCspec**\n\n{e}"

    return lsp.Hover(
        contents=lsp.MarkupContent(
            kind=lsp.MarkupKind.Markdown,
            value=info
        ),
        range=lsp.Range(
            start=lsp.Position(line=line_idx, character=0),
            end=lsp.Position(line=line_idx, character=len(line))
        )
    )


def publish_diagnostics(uri: str):
    document = server.workspace.get_text_document(uri)
    server.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(
            uri=document.uri,
            version=document.version,
            diagnostics=validate_marcspec_document(document)
        )
    )


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
async def did_open_text_document(params: lsp.DidOpenTextDocumentParams):
    """Handle document open events."""
    logging.info(f"Document opened: {params.text_document.uri}")
    publish_diagnostics(params.text_document.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
async def did_change_text_document(params: lsp.DidChangeTextDocumentParams):
    """Handle document change events."""
    logging.info(f"Document changed: {params.text_document.uri}")
    publish_diagnostics(params.text_document.uri)


def main():
    """Main entry point for the MARCspec LSP server."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    server.start_io()

if __name__ == "__main__":
    main()
