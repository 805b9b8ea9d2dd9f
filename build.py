#!/usr/bin/env python3
from weaver.cli import main

if __name__ == "__main__":
    main()
