import sys

from datamigrations.cli import main

sys.exit(main())
