"""
Entry point for running the timetabler as a module.

Usage:
    python -m timetabler sample roster.json
    python -m timetabler generate c001 --data roster.json
    python -m timetabler check --data roster.json
"""

from timetabler.cli import main

if __name__ == "__main__":
    main()
