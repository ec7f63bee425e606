"""ccstatusline - configurable status line for Claude Code.

Renders user-configured widgets into width-fitted terminal lines and
tracks the current 5-hour usage block.
"""

__version__ = "0.1.0"
