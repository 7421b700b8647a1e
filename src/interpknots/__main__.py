from interpknots import cli

# test with: python -m interpknots
if __name__ == "__main__":
    cli.cli()
