from site_drift.cli import cli

if __name__ == "__main__":
    cli()
