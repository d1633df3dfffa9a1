"""Scheduler for the periodic matcha product check.

One job, repeated forever:
  - fetch the listing page
  - extract products (following detail pages in detail mode)
  - filter by brand and matcha keywords
  - email a digest when anything matched
  - sleep JOB_INTERVAL_MINUTES, then start again
"""
