import sys

from termvid.tools.play import main

sys.exit(main())
