import sys

from ndvi_region.cli import main

sys.exit(main())
