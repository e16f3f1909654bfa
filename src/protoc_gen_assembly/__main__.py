import sys

from protoc_gen_assembly.cli import main

if __name__ == "__main__":
    sys.exit(main())
