from ozone.fs.keypath.__about__ import __version__
from ozone.fs.keypath.config import KeyLayout
from ozone.fs.keypath.fsutils import KeyNamespace
from ozone.fs.keypath.paths import KeyPath

__all__ = ["KeyLayout", "KeyNamespace", "KeyPath", "__version__"]
