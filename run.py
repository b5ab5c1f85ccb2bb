#!/usr/bin/env python3
"""
Entry point for the cryptanalysis engine without installing it.
Run with `python run.py [args]`
i.e. `python run.py -h` for help.
"""

import os
import sys

if __name__ == "__main__":
    sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

    from cryptengine import cli
    sys.exit(cli.main())
