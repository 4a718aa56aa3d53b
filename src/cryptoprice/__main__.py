import sys

from cryptoprice.cli.main import main

sys.exit(main())
