"""
Adaptive Tutor.

Mastery-gated adaptive content and grading engine. Students move through
subject -> module -> lesson -> quiz; failing a quiz below the mastery bar
produces a remedial lesson and quiz scoped to that student alone.
"""

__version__ = "1.0.0"
