import sys

from nextword_predictor.cli import main

sys.exit(main())
