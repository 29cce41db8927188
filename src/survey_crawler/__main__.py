"""
Entry point for running survey_crawler as a module.

Usage:
    $ python -m survey_crawler run --url https://survey.example.jp/s/RJP0001
    $ python -m survey_crawler web --port 5000
    $ python -m survey_crawler version
"""
from .main import run_cli

if __name__ == "__main__":
    run_cli()
