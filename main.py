"""Interactive viewer for the beam courier puzzle."""

from __future__ import annotations

import sys

from beam_courier.ui.main import main


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
