"""Package entry point for ``python -m chunkscribe``.

WHY: Users run the transcriber as ``python -m chunkscribe recording.mp3``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates straight to the CLI's main() function.
"""

from chunkscribe.cli import main

if __name__ == "__main__":
    main()
