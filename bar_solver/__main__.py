# bar_solver/__main__.py
# Package entrypoint so you can run:
#   python -m bar_solver --help
# and it will delegate to the JSON runner.
#
# Examples:
#   python -m bar_solver --job job.json
#   python -m bar_solver --job job.json --strategy cpsat --out out/

from __future__ import annotations

from .run_json import main

if __name__ == "__main__":
    main()
