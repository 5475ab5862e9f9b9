import sys

from notebook_health.cli import main

sys.exit(main())
