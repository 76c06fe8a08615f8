"""
PolarisSync - Workstation inventory reconciliation

Removes Polaris workstation records for computers that no longer exist in
Active Directory or Azure AD.
"""

import sys
from polarissync.interface.cli import main


if __name__ == "__main__":
    sys.exit(main())
