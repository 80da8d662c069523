import sys

from autocommit.cli.main import main

sys.exit(main())
