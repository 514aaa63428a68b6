import sys

from owners_crawler.main import main

sys.exit(main())
