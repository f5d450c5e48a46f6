import sys

from crieur.cli import main

sys.exit(main())
