import sys

from cryptengine.cli import main

sys.exit(main())
