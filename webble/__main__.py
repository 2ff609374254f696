import sys

from webble.app import main

sys.exit(main())
