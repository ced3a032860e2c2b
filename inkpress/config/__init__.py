"""Load and validate build configuration YAML for inkpress sites.

This subpackage parses an optional ``inkpress.yaml`` file and produces a
:class:`BuildConfig` that the crawler, compiler, and site builder consume. The
primary entry point is :func:`load_build_config`, which applies defaults for
omitted keys and rejects values of the wrong shape.

Examples
--------
>>> from pathlib import Path
>>> from inkpress.config import load_build_config
>>> config = load_build_config(Path("inkpress.yaml"))  # doctest: +SKIP
>>> config.fail_fast  # doctest: +SKIP
True
"""

from .loader import load_build_config
from .models import CONFLICT_POLICIES, BuildConfig, BuildConfigError

__all__ = [
    "CONFLICT_POLICIES",
    "BuildConfig",
    "BuildConfigError",
    "load_build_config",
]
