import sys

from src.sitemap.commands import main

# python -m src.sitemap generate --per-locale
if __name__ == "__main__":
    sys.exit(main())
