from __future__ import annotations
import functools
import logging
import os
from typing import Any, Callable, Optional, Sequence

log = logging.getLogger(__name__)


@functools.lru_cache(maxsize=None)
def try_import_oqs():
    """Import liboqs-python once; None when it cannot be loaded.

    `oqs` tries to build liboqs on first import and calls sys.exit when the
    shared library still cannot be loaded, hence SystemExit in the tuple.
    """
    try:
        import oqs  # type: ignore
        return oqs
    except (ImportError, OSError, RuntimeError, SystemExit) as exc:
        log.warning("liboqs-python unavailable: %s", exc)
        return None


def require_oqs():
    oqs_mod = try_import_oqs()
    if oqs_mod is None:
        raise RuntimeError("liboqs-python (oqs) is not available; install liboqs-python")
    return oqs_mod


def _first_enabled(factory: Callable[[str], Any], kind: str, env_var: str, candidates: Sequence[str]) -> Optional[str]:
    env_val = os.getenv(env_var)
    names = [env_val] if env_val else []
    names += [c for c in candidates if c != env_val]
    for name in names:
        try:
            with factory(name):
                return name
        except Exception:
            # liboqs raises MechanismNotSupportedError / MechanismNotEnabledError
            log.debug("%s mechanism %s not enabled in liboqs", kind, name)
    return None


def pick_kem_algorithm(oqs_mod, env_var: str, candidates: Sequence[str]) -> Optional[str]:
    """First KEM in `candidates` this liboqs build can instantiate; `env_var` is tried first."""
    return _first_enabled(oqs_mod.KeyEncapsulation, "KEM", env_var, candidates)


def pick_sig_algorithm(oqs_mod, env_var: str, candidates: Sequence[str]) -> Optional[str]:
    """Signature counterpart of `pick_kem_algorithm`."""
    return _first_enabled(oqs_mod.Signature, "SIG", env_var, candidates)
