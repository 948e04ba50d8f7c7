import sys

from site_search.app import main


sys.exit(main())
