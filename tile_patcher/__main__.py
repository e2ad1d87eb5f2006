import sys

from .tile_editor import main

sys.exit(main())
