# cutroute/__main__.py
# Package entrypoint so you can run:
#   python -m cutroute --help
# and it will delegate to the CLI.
#
# Examples:
#   python -m cutroute tsp --nodes nodes.csv
#   python -m cutroute cut --job job.json --out out/

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
