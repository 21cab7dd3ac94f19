import sys

from .kdig_to_prometheus import main

sys.exit(main())
