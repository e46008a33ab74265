import sys

from .simulator import main

if __name__ == '__main__':
	sys.exit(main())
