"""
Run the Cortex panel directly from a source checkout.

Adds ``src`` to the import path so the console can be started without
installing the package:

    python main.py
"""

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def run() -> None:
    from cortex_panel.main import main

    main()


if __name__ == "__main__":
    run()
