import sys

from solcli.main import main

sys.exit(main())
