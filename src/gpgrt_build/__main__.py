import sys

from gpgrt_build.cli import main

sys.exit(main())
