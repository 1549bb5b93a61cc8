from __future__ import annotations
"""Host document contract and an in-memory document.

The committer only talks to ``HostDocument``. Commit calls report the
"asset type not allowed here" case by raising ``HostEnvironmentLimitation``;
every other commit failure is a plain ``HostCommitFailure`` (or any other
exception).
"""

import enum
import hashlib
import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from avatarcast.services.errors import HostCommitFailure

logger = logging.getLogger(__name__)


class NodeKind(str, enum.Enum):
    RECTANGLE = "RECTANGLE"
    FRAME = "FRAME"
    ELLIPSE = "ELLIPSE"
    TEXT = "TEXT"


# Node kinds that can carry a fill and so may be reused as the placeholder
FILLABLE_KINDS = frozenset({NodeKind.RECTANGLE, NodeKind.FRAME})


@dataclass(frozen=True)
class Fill:
    kind: str  # VIDEO | IMAGE
    asset_hash: str
    scale_mode: str = "FILL"


@dataclass
class Placeholder:
    """A container node in the host document."""

    id: str
    kind: NodeKind
    name: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    fills: list[Fill] = field(default_factory=list)


@dataclass(frozen=True)
class Notice:
    message: str
    error: bool = False
    timeout_ms: int | None = None


class HostDocument(ABC):
    """Operations the committer needs from the document it writes into."""

    @abstractmethod
    def selection(self) -> list[Placeholder]:
        """Currently selected nodes."""

    @abstractmethod
    def viewport_center(self) -> tuple[float, float]:
        ...

    @abstractmethod
    def create_placeholder(
        self, *, name: str, width: float, height: float, x: float, y: float,
    ) -> Placeholder:
        ...

    @abstractmethod
    def rename(self, placeholder: Placeholder, name: str) -> None:
        ...

    @abstractmethod
    async def commit_motion(self, placeholder: Placeholder, data: bytes) -> None:
        """Show ``data`` as video on the placeholder."""

    @abstractmethod
    async def commit_image(self, placeholder: Placeholder, data: bytes) -> None:
        """Show ``data`` as a still image on the placeholder."""

    @abstractmethod
    def remove(self, placeholder: Placeholder) -> None:
        ...

    @abstractmethod
    def select_and_frame(self, placeholder: Placeholder) -> None:
        """Select the node and scroll/zoom the viewport onto it."""

    @abstractmethod
    def notify(self, message: str, *, error: bool = False, timeout_ms: int | None = None) -> None:
        """Surface a transient notice to the user."""


class InMemoryDocument(HostDocument):
    """Self-contained document used by the service and the test suite.

    ``motion_failure`` makes every ``commit_motion`` raise the given error,
    which is how a host that forbids video (e.g. a drafts location) behaves.
    """

    def __init__(
        self,
        *,
        viewport: tuple[float, float, float, float] = (0.0, 0.0, 1440.0, 900.0),
        motion_failure: Exception | None = None,
        image_failure: Exception | None = None,
    ) -> None:
        self.nodes: dict[str, Placeholder] = {}
        self.selected: list[str] = []
        self.viewport = viewport
        self.framed: list[str] = []
        self.notices: list[Notice] = []
        self.assets: dict[str, bytes] = {}
        self.motion_failure = motion_failure
        self.image_failure = image_failure
        self._ids = itertools.count(1)

    def add_node(self, kind: NodeKind, name: str = "", **geometry: float) -> Placeholder:
        node = Placeholder(id=f"node:{next(self._ids)}", kind=kind, name=name, **geometry)
        self.nodes[node.id] = node
        return node

    def select(self, *nodes: Placeholder) -> None:
        self.selected = [n.id for n in nodes]

    # ── HostDocument ──

    def selection(self) -> list[Placeholder]:
        return [self.nodes[i] for i in self.selected if i in self.nodes]

    def viewport_center(self) -> tuple[float, float]:
        x, y, w, h = self.viewport
        return x + w / 2, y + h / 2

    def create_placeholder(self, *, name, width, height, x, y) -> Placeholder:
        return self.add_node(NodeKind.RECTANGLE, name, x=x, y=y, width=width, height=height)

    def rename(self, placeholder, name) -> None:
        placeholder.name = name

    async def commit_motion(self, placeholder, data) -> None:
        if self.motion_failure is not None:
            raise self.motion_failure
        placeholder.fills = [Fill("VIDEO", self._store(data))]

    async def commit_image(self, placeholder, data) -> None:
        if self.image_failure is not None:
            raise self.image_failure
        if not data:
            raise HostCommitFailure("Image data is empty")
        placeholder.fills = [Fill("IMAGE", self._store(data))]

    def remove(self, placeholder) -> None:
        self.nodes.pop(placeholder.id, None)
        self.selected = [i for i in self.selected if i != placeholder.id]

    def select_and_frame(self, placeholder) -> None:
        self.selected = [placeholder.id]
        self.framed.append(placeholder.id)

    def notify(self, message, *, error=False, timeout_ms=None) -> None:
        logger.info("Notice%s: %s", " (error)" if error else "", message)
        self.notices.append(Notice(message, error, timeout_ms))

    def _store(self, data: bytes) -> str:
        digest = hashlib.sha1(data).hexdigest()
        self.assets[digest] = data
        return digest
