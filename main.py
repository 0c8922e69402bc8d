from ujsdockets.scraper.run import _cli_entrypoint

if __name__ == "__main__":
    # Same entry as the ``ujs-dockets`` console script; see ``--help``.
    raise SystemExit(_cli_entrypoint())
