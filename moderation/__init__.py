"""
Moderation app package for the frontend resource hub.

Holds the visibility/approval engine that decides which resources,
categories and tags are shown to whom, and the super-admin transition
endpoint that approves, rejects or reverts submissions.
"""
