"""Allow ``python -m vecbox.cli`` execution."""

from vecbox.cli.embed import main

main()
