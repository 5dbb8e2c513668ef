# Supabase tables written here: posts, comments, file_attachments, poll_options, poll_votes
# Table structure is documented in sportsme/modules/feed/models.py
# Supabase Storage bucket: attachments (public)

"""
Attachment objects are stored at:

    <group_id>/<post_id>/<epoch milliseconds>-<original filename>

A file_attachments row is written only for objects whose upload succeeded.
Poll options are written once, when the poll post is created.
"""
