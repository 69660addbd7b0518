import sys

from beranouns.adapters.cli import main

sys.exit(main())
