"""Scheduler module for the league notification checks.

Every tick (default: each minute, plus once at start-up) runs, in order:
  - Auto-open registration for groups whose weekly open time is now
  - Registration-open notices for games not yet announced
  - Game-day reminders for seated players
"""
