# Supabase tables: posts, comments, file_attachments, poll_options, poll_votes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

posts:
- id: bigint (primary key)
- group_id: bigint (foreign key to groups.id, on delete cascade)
- author_id: uuid (foreign key to auth.users.id)
- author_name: text (nullable) - display name snapshot taken when the post is written
- content: text (not null)
- type: text (not null) - values: message, poll
- created_at: timestamp (default: now())

comments:
- id: bigint (primary key)
- post_id: bigint (foreign key to posts.id, on delete cascade)
- author_id: uuid (foreign key to auth.users.id)
- author_name: text (nullable) - display name snapshot
- content: text (not null)
- created_at: timestamp (default: now())

file_attachments:
- id: bigint (primary key)
- post_id: bigint (foreign key to posts.id, on delete cascade)
- url: text (public URL in the attachments bucket)
- original_name: text
- mime_type: text
- size: bigint (bytes)

poll_options:
- id: bigint (primary key)
- post_id: bigint (foreign key to posts.id, on delete cascade)
- text: text (not null)

poll_votes:
- id: bigint (primary key)
- post_id: bigint (foreign key to posts.id, on delete cascade)
- option_id: bigint (foreign key to poll_options.id, on delete cascade)
- user_id: uuid (foreign key to auth.users.id)
- unique constraint on (post_id, user_id)

author_name is never updated after the row is written: a renamed user keeps
their old name on earlier posts and comments.
"""
