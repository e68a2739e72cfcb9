"""Run the netroute CLI with ``python -m netroute``."""

from netroute.cli import main

if __name__ == "__main__":
    main()
