"""
Shiptivity: a kanban board of client records with strictly ordered lanes.

Every lane keeps a gapless, unique priority sequence; moves between and
within lanes are applied as single atomic commits.
"""

__version__ = "0.1.0"
