"""Remote video service clients.

Each provider module implements the async render pattern:
  POST create video → GET status → hand asset URLs to the committer
"""
