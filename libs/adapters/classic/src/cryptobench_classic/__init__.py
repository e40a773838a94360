"""Adapter package for classical algorithms backed by `cryptography`.

Importing submodules triggers registration of adapters.
"""

# Trigger registration side-effects
from . import ec_adapters as _ec_adapters  # noqa: F401
from . import rsa_adapter as _rsa_adapter  # noqa: F401

__all__: list[str] = []
