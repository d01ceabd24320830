"""
Flipper Deployment - Debugger
Tests every known network, then deploys to the one you pick
"""

import sys

from deployment.runner import DEBUG, main


if __name__ == "__main__":
    sys.exit(main(DEBUG))
