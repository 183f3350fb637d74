import sys

from depscop.cli import main

sys.exit(main())
