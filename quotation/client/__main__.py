import sys

from quotation.client.main import main

sys.exit(main())
