import sys

from fkharness.cli import main

sys.exit(main())
