import sys

from docsguard.cli import main

sys.exit(main())
