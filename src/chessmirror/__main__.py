import sys

from chessmirror.cli import main

sys.exit(main())
