"""Business logic for the Campus Hub write path.

Request-facing functions validate input, write the primary rows and stage
follow-up jobs with :func:`campus_hub.services.scheduler.run_after`. Counter
maintenance, notifications, feed fan-out and account cleanup run as those
jobs.
"""
