from __future__ import annotations

from tesseract_orange.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
