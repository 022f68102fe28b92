import sys

from quotation.server.main import main

sys.exit(main())
