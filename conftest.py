# Tests import the package as ``src.keyvar``; keep the repository root on sys.path.
