"""Adapter package for liboqs-backed algorithms.

Importing submodules triggers registration of adapters. `oqs` itself is
only imported when an adapter is first constructed; without it the
adapters raise RuntimeError at construction time.
"""

# Trigger registration side-effects
from . import kem_adapters as _kem_adapters  # noqa: F401
from . import sig_adapters as _sig_adapters  # noqa: F401
from ._util import try_import_oqs

__all__: list[str] = ["try_import_oqs"]
