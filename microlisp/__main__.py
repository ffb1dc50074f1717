import sys

from microlisp.repl import main

sys.exit(main())
