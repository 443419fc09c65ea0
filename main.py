"""docsift -- application entry point.

Equivalent to the ``docsift`` console script; see docsift.cli for the
startup sequence and options.
"""

import sys

from docsift.cli import main

if __name__ == "__main__":
    sys.exit(main())
