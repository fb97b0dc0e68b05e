"""Run the layerconf CLI as ``python -m layerconf``.

Loads the layered configuration for the current directory (or the one named
by ``--config-dir``/``$LAYERCONF_DIR``) and dispatches to ``info``,
``config``, ``get``, ``has``, ``sources`` or ``diff``.
"""

from __future__ import annotations

from .adapters.cli.main import main
from .composition import build_production

if __name__ == "__main__":
    raise SystemExit(main(services_factory=build_production))
