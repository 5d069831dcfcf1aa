"""Editor host contract and the directory-backed host."""

from asmxref.host.local import LocalWorkspace
from asmxref.host.protocol import LiveDocument, WorkspaceHost

__all__ = ["LiveDocument", "LocalWorkspace", "WorkspaceHost"]
