"""Language server wiring: capabilities, document sync and feature dispatch."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from lsprotocol.types import (
    TEXT_DOCUMENT_CODE_ACTION,
    TEXT_DOCUMENT_CODE_LENS,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DEFINITION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    TEXT_DOCUMENT_HOVER,
    CodeAction,
    CodeActionKind,
    CodeActionOptions,
    CodeActionParams,
    CodeLens,
    CodeLensOptions,
    CodeLensParams,
    CompletionItem,
    CompletionOptions,
    CompletionParams,
    DefinitionParams,
    Diagnostic,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    Hover,
    HoverParams,
    Location,
    PublishDiagnosticsParams,
    SaveOptions,
    ShowDocumentParams,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.uris import to_fs_path

from . import __version__
from .builtin_config import repository_for, run_build
from .config import Config
from .documents import DocumentStore
from .features import (
    APPLY_STUB_COMMAND,
    TRIGGER_CHARACTERS,
    DiagnosticsPublisher,
    apply_stub,
    code_actions,
    code_lenses,
    completion_items,
    definition,
    hover,
)
from .oracle import OracleClient, ProcessRunner
from .resolver import SymbolResolver

logger = logging.getLogger(__name__)

SERVER_NAME = "ti-lsp"


class TiLanguageServer(LanguageServer):
    """pygls server holding the collaborators every handler needs."""

    def __init__(self, settings: Config, *args, **kwargs) -> None:
        super().__init__(
            SERVER_NAME,
            __version__,
            *args,
            text_document_sync_kind=TextDocumentSyncKind.Full,
            **kwargs,
        )
        self.settings = settings
        self.documents = DocumentStore()
        self.oracle = OracleClient(
            ProcessRunner(settings.oracle_executable, settings.temp_prefix, settings.temp_suffix),
            settings,
        )
        self.resolver = SymbolResolver()
        self.builtins = repository_for(settings)
        self.publisher = DiagnosticsPublisher(self.oracle, self.publish)

    def publish(self, uri: str, diagnostics: list[Diagnostic]) -> None:
        self.text_document_publish_diagnostics(
            PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )

    def is_builtin_config(self, uri: str) -> bool:
        if self.builtins is None:
            return False
        path = to_fs_path(uri)
        return path is not None and self.builtins.contains(path)

    def validate(self, uri: str, text: str) -> None:
        """Start a detached diagnostics cycle for a source document."""
        if self.is_builtin_config(uri):
            return
        self.publisher.schedule(uri, text)


def create_server(settings: Optional[Config] = None) -> TiLanguageServer:
    """Build a server with every feature registered."""
    server = TiLanguageServer(settings or Config.from_env())

    @server.feature(TEXT_DOCUMENT_DID_OPEN)
    def did_open(ls: TiLanguageServer, params: DidOpenTextDocumentParams) -> None:
        uri = params.text_document.uri
        ls.documents.open(uri, params.text_document.text)
        ls.validate(uri, params.text_document.text)

    @server.feature(TEXT_DOCUMENT_DID_CHANGE)
    def did_change(ls: TiLanguageServer, params: DidChangeTextDocumentParams) -> None:
        if not params.content_changes:
            return
        uri = params.text_document.uri
        text = params.content_changes[-1].text
        ls.documents.update(uri, text)
        ls.validate(uri, text)

    @server.feature(TEXT_DOCUMENT_DID_SAVE, SaveOptions(include_text=True))
    async def did_save(ls: TiLanguageServer, params: DidSaveTextDocumentParams) -> None:
        uri = params.text_document.uri
        if params.text is not None:
            ls.documents.update(uri, params.text)

        text = ls.documents.get(uri)
        if text is not None:
            ls.validate(uri, text)

        if ls.is_builtin_config(uri):
            await asyncio.to_thread(run_build, ls.settings)

    @server.feature(
        TEXT_DOCUMENT_COMPLETION,
        CompletionOptions(trigger_characters=TRIGGER_CHARACTERS),
    )
    async def completion(ls: TiLanguageServer, params: CompletionParams) -> list[CompletionItem]:
        uri = params.text_document.uri
        text = ls.documents.get(uri)
        if text is None:
            return []
        return await asyncio.to_thread(
            completion_items, ls.oracle, text, params.position, ls.is_builtin_config(uri)
        )

    @server.feature(TEXT_DOCUMENT_HOVER)
    async def on_hover(ls: TiLanguageServer, params: HoverParams) -> Optional[Hover]:
        text = ls.documents.get(params.text_document.uri)
        if text is None:
            return None
        return await asyncio.to_thread(
            hover, ls.oracle, text, params.position, ls.settings.language_id
        )

    @server.feature(TEXT_DOCUMENT_DEFINITION)
    async def on_definition(ls: TiLanguageServer, params: DefinitionParams) -> Optional[Location]:
        uri = params.text_document.uri
        text = ls.documents.get(uri)
        if text is None:
            return None
        return await asyncio.to_thread(
            definition, ls.oracle, ls.resolver, text, uri, params.position, ls.builtins
        )

    @server.feature(TEXT_DOCUMENT_CODE_LENS, CodeLensOptions(resolve_provider=False))
    async def on_code_lens(ls: TiLanguageServer, params: CodeLensParams) -> list[CodeLens]:
        text = ls.documents.get(params.text_document.uri)
        if text is None:
            return []
        return await asyncio.to_thread(code_lenses, ls.oracle, text)

    @server.feature(
        TEXT_DOCUMENT_CODE_ACTION,
        CodeActionOptions(code_action_kinds=[CodeActionKind.QuickFix]),
    )
    async def on_code_action(ls: TiLanguageServer, params: CodeActionParams) -> list[CodeAction]:
        text = ls.documents.get(params.text_document.uri)
        if text is None:
            return []
        return await asyncio.to_thread(
            code_actions, ls.oracle, ls.builtins, text, params.context.diagnostics
        )

    @server.command(APPLY_STUB_COMMAND)
    async def on_apply_stub(ls: TiLanguageServer, payload: dict | None = None) -> Optional[str]:
        if ls.builtins is None or payload is None:
            return None

        path = await asyncio.to_thread(apply_stub, payload, ls.builtins)
        if path is None:
            return None

        await asyncio.to_thread(run_build, ls.settings)
        ls.window_show_document(ShowDocumentParams(uri=path.as_uri(), take_focus=True))
        return path.as_uri()

    return server
