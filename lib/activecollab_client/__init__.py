__version__ = "2.0.2"

from .client import ActiveCollabClient
from .config_types import ClientConfig
from .errors import ActiveCollabError, CallFailed, FileNotReadable, IssueTokenException
from .request import Attachment
from .response import Response

__all__ = [
    "ActiveCollabClient",
    "ClientConfig",
    "Attachment",
    "Response",
    "ActiveCollabError",
    "CallFailed",
    "FileNotReadable",
    "IssueTokenException",
]
