try:
    from ._version import version as __version__  # populated by setuptools-scm
except ModuleNotFoundError:
    __version__ = "0.0.0"

from .cloudlet import CloudletStatus, WebCloudlet
from .session import CloudletPair, WebSession

__all__ = ["__version__", "CloudletPair", "CloudletStatus", "WebCloudlet", "WebSession"]
