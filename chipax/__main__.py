import sys

from chipax.cli import main

sys.exit(main())
