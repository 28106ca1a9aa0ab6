import sys

from assurvie.cli import main

sys.exit(main())
