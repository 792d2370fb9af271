"""Console-script entrypoints.

These wrappers delegate to the tool modules so argument parsing lives in one place.
"""

from __future__ import annotations


def pick() -> None:
    from picklogic.tools.pick_cli import main

    main()
