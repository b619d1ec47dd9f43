"""Ejecuta `clip-paste` desde un checkout, sin instalarlo.

    python main.py save --json
    python main.py doctor run

Los paquetes viven bajo `src/`; este script los añade a `sys.path` antes de
delegar en `cli.main.run`.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Consolas de Windows en cp1252 no pueden imprimir el banner.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")


def main() -> None:
    src = Path(__file__).resolve().parent / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
