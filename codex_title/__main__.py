import sys

from codex_title.cli import main

sys.exit(main())
