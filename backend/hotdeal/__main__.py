import sys

from hotdeal.main import main

sys.exit(main())
