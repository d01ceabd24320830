"""
Flipper Deployment - Main Entry Point
Non-interactive deployment driven by environment variables
"""

import sys

from deployment.runner import SCRIPTED, main


if __name__ == "__main__":
    sys.exit(main(SCRIPTED))
