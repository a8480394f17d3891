import sys

from alstools.alsversions.cli import main

sys.exit(main())
