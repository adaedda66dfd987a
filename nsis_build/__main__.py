import sys

from nsis_build.cli import main

sys.exit(main())
