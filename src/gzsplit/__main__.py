import sys

from gzsplit.cli import main

sys.exit(main())
