# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Recognition of plugin project directories from marker files."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from ..config import DEFAULT_MARKERS

logger = logging.getLogger(__name__)

PathLike = Union[str, PurePath]


class ProjectEventKind(str, Enum):
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class ProjectEvent:
    kind: ProjectEventKind
    root_path: str


@dataclass
class ProjectState:
    root_path: str
    recognized: bool = False


ProjectListener = Callable[[ProjectEvent], None]


def _normalize(root: PathLike) -> str:
    return os.path.normpath(os.fspath(root))


class ProjectClassifier:
    """Tracks which candidate roots are recognized plugin projects.

    A root is recognized iff every marker file existed at the last check.
    State changes only on explicit calls; the classifier never polls the
    file system on its own.
    """

    def __init__(self, markers: Iterable[str] = DEFAULT_MARKERS):
        self.markers = tuple(markers)
        self._states: Dict[str, ProjectState] = {}
        self._listeners: List[ProjectListener] = []

    def subscribe(self, listener: ProjectListener) -> Callable[[], None]:
        """Register ``listener`` for added/removed events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def check_directory(self, root: PathLike, marker_existence: Mapping[str, bool]) -> Optional[ProjectEvent]:
        """Update the state of ``root`` from marker evidence.

        Args:
            root: Candidate root directory
            marker_existence: Marker name to presence; a missing entry counts as absent

        Returns:
            The emitted event, or None when the state did not change
        """
        root_path = _normalize(root)
        state = self._states.setdefault(root_path, ProjectState(root_path))
        all_present = all(marker_existence.get(marker, False) for marker in self.markers)

        if all_present and not state.recognized:
            state.recognized = True
            logger.info(f"Plugin directory detected: {root_path}")
            return self._emit(ProjectEvent(ProjectEventKind.ADDED, root_path))

        if not all_present and state.recognized:
            state.recognized = False
            missing = [marker for marker in self.markers if not marker_existence.get(marker, False)]
            logger.info(f"Plugin directory no longer recognized: {root_path} (missing {', '.join(missing)})")
            return self._emit(ProjectEvent(ProjectEventKind.REMOVED, root_path))

        return None

    def check_path(self, root: PathLike) -> Optional[ProjectEvent]:
        """Check ``root`` against the markers present on disk."""
        root_dir = Path(root)
        existence = {marker: (root_dir / marker).exists() for marker in self.markers}
        logger.debug(f"Checking folder {root_dir}: {existence}")
        return self.check_directory(root, existence)

    def remove_directory(self, root: PathLike) -> Optional[ProjectEvent]:
        """Forget ``root``; emits a removed event if it was recognized."""
        state = self._states.pop(_normalize(root), None)
        if state is None or not state.recognized:
            return None
        return self._emit(ProjectEvent(ProjectEventKind.REMOVED, state.root_path))

    def is_recognized(self, root: PathLike) -> bool:
        state = self._states.get(_normalize(root))
        return state is not None and state.recognized

    def state(self, root: PathLike) -> Optional[ProjectState]:
        return self._states.get(_normalize(root))

    def known_roots(self) -> List[str]:
        return list(self._states)

    def recognized_roots(self) -> List[str]:
        return [root for root, state in self._states.items() if state.recognized]

    def is_marker(self, path: PathLike) -> bool:
        return PurePath(path).name in self.markers

    def dispose(self) -> None:
        self._states.clear()
        self._listeners.clear()

    def _emit(self, event: ProjectEvent) -> ProjectEvent:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Project listener failed on {event.kind.value} {event.root_path}: {e}")
        return event
