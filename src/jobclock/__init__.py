"""Jobclock - a personal work-session tracker."""

__version__ = "0.1.0"
