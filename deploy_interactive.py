"""
Flipper Deployment - Interactive
Prompts for the private key, the initial value and confirmations
"""

import sys

from deployment.runner import INTERACTIVE, main


if __name__ == "__main__":
    sys.exit(main(INTERACTIVE))
