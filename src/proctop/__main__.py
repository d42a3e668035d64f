import sys

from proctop.app import main

sys.exit(main())
