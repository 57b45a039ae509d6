"""
Leave workflow kernel.

The leave approval state machine, leave-day arithmetic, participant
resolution and the persistence/services around them.  Configuration lives
in the separate ``leave_config`` package; the kernel never imports it.
"""

__version__ = "0.1.0"
