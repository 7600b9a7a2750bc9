"""
Entrypoint for ``python -m s7tool``.
"""

from s7tool.cli import main

if __name__ == "__main__":
    main()
