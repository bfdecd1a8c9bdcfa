#!/usr/bin/env python3

import logging
import os
from typing import Optional

from pygls.server import LanguageServer
from lsprotocol import types as lsp

from .. import __version__
from ..config import ValidatorConfig, validator_config
from ..models.document import Document
from ..project.classifier import ProjectClassifier, ProjectEvent, ProjectEventKind
from ..schema.json_schema_loader import SchemaRegistry
from ..validation.pipeline import MANIFEST_FILENAME, ValidationPipeline
from .document_processor import DiagnosticPublisher, DocumentProcessor
from .uri_utils import uri_to_path

logger = logging.getLogger(__name__)

WATCHER_REGISTRATION_ID = "plugin-schema-markers"


class PluginSchemaLanguageServer:
    """Main language server class for plugin schema diagnostics."""

    def __init__(self, config: Optional[ValidatorConfig] = None):
        self.config = config if config is not None else validator_config
        self.server = LanguageServer("plugin-schema", __version__)

        # Initialize components
        self.schema_registry = SchemaRegistry(self.config.schema_dir)
        self.pipeline = ValidationPipeline(self.schema_registry.validators())
        self.classifier = ProjectClassifier(self.config.markers)
        self.publisher = DiagnosticPublisher(self.server)
        self.document_processor = DocumentProcessor(self.pipeline, self.classifier, self.publisher)
        self._initialized = False

        self.classifier.subscribe(self._on_project_event)

        # Register handlers
        self._register_handlers()

    def _register_handlers(self):
        """Register all LSP handlers."""

        @self.server.feature(lsp.INITIALIZED)
        def initialized(ls, params):
            self._on_initialized(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
        def did_open(ls, params):
            self._on_text_document_did_open(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
        def did_change(ls, params):
            self._on_text_document_did_change(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
        def did_save(ls, params):
            self._on_text_document_did_save(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
        def did_close(ls, params):
            self._on_text_document_did_close(ls, params)

        @self.server.feature(lsp.WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS)
        def did_change_workspace_folders(ls, params):
            self._on_workspace_did_change_workspace_folders(ls, params)

        @self.server.feature(lsp.WORKSPACE_DID_CHANGE_WATCHED_FILES)
        def did_change_watched_files(ls, params):
            self._on_workspace_did_change_watched_files(ls, params)

        @self.server.feature(lsp.SHUTDOWN)
        def shutdown(ls, params):
            self._on_shutdown(ls, params)

    def start(self):
        """Start the language server."""
        self.server.start_io()

    def _on_initialized(self, ls, params: lsp.InitializedParams):
        """Check workspace folders once the client is ready."""
        logger.info("Initializing plugin schema language server")
        self._initialized = True

        folders = list(self.server.workspace.folders.values())
        if folders:
            logger.info(f"Found {len(folders)} workspace folders.")
            for folder in folders:
                self.classifier.check_path(uri_to_path(folder.uri))
        elif self.server.workspace.root_path:
            self.classifier.check_path(self.server.workspace.root_path)
        else:
            logger.info("No workspace folders open on activation.")

        self._register_marker_watchers()

    def _register_marker_watchers(self):
        watchers = [lsp.FileSystemWatcher(glob_pattern=f"**/{marker}") for marker in self.classifier.markers]
        registration = lsp.Registration(
            id=WATCHER_REGISTRATION_ID,
            method=lsp.WORKSPACE_DID_CHANGE_WATCHED_FILES,
            register_options=lsp.DidChangeWatchedFilesRegistrationOptions(watchers=watchers),
        )
        try:
            self.server.register_capability(lsp.RegistrationParams(registrations=[registration]))
        except Exception as e:
            logger.warning(f"Failed to register marker file watchers: {e}")

    def _on_text_document_did_open(self, ls, params: lsp.DidOpenTextDocumentParams):
        """Handle document open event."""
        text_document = params.text_document
        file_path = uri_to_path(text_document.uri)

        # A manifest's own directory is a candidate root even outside workspace folders.
        if os.path.basename(file_path) == MANIFEST_FILENAME:
            root = os.path.dirname(file_path)
            if self.classifier.state(root) is None:
                event = self.classifier.check_path(root)
                # The ADDED handler already revalidated the open documents of the root.
                if (
                    event is not None
                    and event.kind == ProjectEventKind.ADDED
                    and text_document.uri in self.server.workspace.text_documents
                ):
                    return

        self._process(text_document.uri, text_document.text, text_document.version)

    def _on_text_document_did_change(self, ls, params: lsp.DidChangeTextDocumentParams):
        """Handle document change event."""
        uri = params.text_document.uri
        document = self.server.workspace.get_text_document(uri)
        self._process(uri, document.source, params.text_document.version)

    def _on_text_document_did_save(self, ls, params: lsp.DidSaveTextDocumentParams):
        """Handle document save event."""
        uri = params.text_document.uri
        document = self.server.workspace.get_text_document(uri)
        text = params.text if params.text is not None else document.source
        self._process(uri, text, document.version or 0)

    def _on_text_document_did_close(self, ls, params: lsp.DidCloseTextDocumentParams):
        """Handle document close event."""
        self.document_processor.close_document(params.text_document.uri)

    def _on_workspace_did_change_workspace_folders(self, ls, params: lsp.DidChangeWorkspaceFoldersParams):
        """Handle workspace folders being added or removed."""
        logger.info("Workspace folders changed.")
        for folder in params.event.removed:
            self.classifier.remove_directory(uri_to_path(folder.uri))
        for folder in params.event.added:
            self.classifier.check_path(uri_to_path(folder.uri))

    def _on_workspace_did_change_watched_files(self, ls, params: lsp.DidChangeWatchedFilesParams):
        """Re-check candidate roots whose marker files changed."""
        known_roots = set(self.classifier.known_roots())
        for change in params.changes:
            file_path = uri_to_path(change.uri)
            if not self.classifier.is_marker(file_path):
                continue
            root = os.path.normpath(os.path.dirname(file_path))
            if root in known_roots:
                self.classifier.check_path(root)

    def _on_shutdown(self, ls, params):
        self.publisher.dispose()
        self.classifier.dispose()

    def _on_project_event(self, event: ProjectEvent):
        if event.kind == ProjectEventKind.ADDED:
            if self._initialized:
                name = os.path.basename(event.root_path) or event.root_path
                self.server.show_message(
                    f'Plugin directory detected in "{name}". Validator is active.', lsp.MessageType.Info
                )
            self._revalidate_open_documents(event.root_path)
        else:
            self.document_processor.clear_root(event.root_path)

    def _revalidate_open_documents(self, root: str):
        """Re-validate all open documents belonging to ``root``."""
        try:
            for uri, document in self.server.workspace.text_documents.items():
                if self.document_processor.belongs_to(uri, root):
                    self._process(uri, document.source, document.version or 0)
        except Exception as e:
            logger.error(f"Failed to revalidate open documents: {e}")

    def _process(self, uri: str, text: str, version: Optional[int]):
        self.document_processor.process_document(Document(uri=uri, text=text, version=version or 0))
