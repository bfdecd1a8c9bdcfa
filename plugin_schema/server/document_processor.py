#!/usr/bin/env python3

import logging
from pathlib import PurePath
from typing import Dict, List, Optional

from lsprotocol import types as lsp

from ..models.document import Diagnostic, Document
from ..project.classifier import ProjectClassifier
from ..validation.pipeline import ValidationPipeline, project_root_for, schema_kind_for_path
from .uri_utils import uri_to_path

logger = logging.getLogger(__name__)

DIAGNOSTIC_SOURCE = "plugin-schema"


def to_lsp_diagnostic(diagnostic: Diagnostic) -> lsp.Diagnostic:
    start = diagnostic.range.start
    end = diagnostic.range.end
    return lsp.Diagnostic(
        range=lsp.Range(
            start=lsp.Position(line=start.line, character=start.character),
            end=lsp.Position(line=end.line, character=end.character),
        ),
        message=diagnostic.message,
        severity=lsp.DiagnosticSeverity(int(diagnostic.severity)),
        source=DIAGNOSTIC_SOURCE,
    )


class DiagnosticPublisher:
    """Owns the set of documents that currently have published diagnostics.

    Every publish replaces the document's previous list.
    """

    def __init__(self, server):
        self.server = server
        self._published: Dict[str, Optional[int]] = {}

    def publish(self, uri: str, diagnostics: List[Diagnostic], version: Optional[int] = None):
        try:
            logger.info(f"Publishing {len(diagnostics)} diagnostics for {uri}")
            self.server.publish_diagnostics(uri, [to_lsp_diagnostic(d) for d in diagnostics], version=version)
            self._published[uri] = version
        except Exception as e:
            logger.error(f"Failed to publish diagnostics {uri}: {e}")

    def clear(self, uri: str):
        if uri not in self._published:
            return
        try:
            self.server.publish_diagnostics(uri, [])
        except Exception as e:
            logger.error(f"Failed to clear diagnostics {uri}: {e}")
        self._published.pop(uri, None)

    def published_uris(self) -> List[str]:
        return list(self._published)

    def dispose(self):
        for uri in self.published_uris():
            self.clear(uri)


class DocumentProcessor:
    """Runs the validation pipeline for documents inside recognized plugin projects."""

    def __init__(self, pipeline: ValidationPipeline, classifier: ProjectClassifier, publisher: DiagnosticPublisher):
        self.pipeline = pipeline
        self.classifier = classifier
        self.publisher = publisher
        self._latest_versions: Dict[str, int] = {}

    def process_document(self, document: Document) -> Optional[List[Diagnostic]]:
        """Validate ``document`` and publish its diagnostics.

        Returns:
            The published diagnostics, an empty list when the document's
            project is not recognized, or None when the document is not a
            plugin document or the snapshot was superseded.
        """
        file_path = uri_to_path(document.uri)
        kind = schema_kind_for_path(file_path)
        if kind is None:
            return None

        latest = self._latest_versions.get(document.uri)
        if latest is not None and document.version < latest:
            logger.debug(f"Skipping stale snapshot v{document.version} of {document.uri}")
            return None
        self._latest_versions[document.uri] = document.version

        root = project_root_for(file_path, kind)
        if not self.classifier.is_recognized(root):
            logger.debug(f"{file_path} is outside a recognized plugin directory")
            self.publisher.clear(document.uri)
            return []

        diagnostics = self.pipeline.run(document, kind)

        # A newer snapshot may have been processed while this one ran.
        if self._latest_versions.get(document.uri) != document.version:
            logger.debug(f"Discarding diagnostics for superseded v{document.version} of {document.uri}")
            return None

        self.publisher.publish(document.uri, diagnostics, document.version)
        return diagnostics

    def close_document(self, uri: str):
        """Handle document close event."""
        self._latest_versions.pop(uri, None)
        self.publisher.clear(uri)

    def clear_root(self, root: str):
        """Clear diagnostics of every published document belonging to ``root``."""
        for uri in self.publisher.published_uris():
            if self.belongs_to(uri, root):
                self.publisher.clear(uri)

    @staticmethod
    def belongs_to(uri: str, root: str) -> bool:
        file_path = uri_to_path(uri)
        kind = schema_kind_for_path(file_path)
        if kind is None:
            return False
        return project_root_for(file_path, kind) == PurePath(root)
