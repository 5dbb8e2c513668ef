# Supabase tables: groups, group_memberships
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups:
- id: bigint (primary key)
- name: text (not null)
- code: text (unique, not null) - 6 character base-36 join code
- owner_id: uuid (foreign key to auth.users.id, not null) - creator
- created_at: timestamp (default: now())
- deleting a group cascades to its posts (and from there to comments,
  attachments, poll options and votes)

group_memberships:
- id: bigint (primary key)
- user_id: uuid (foreign key to auth.users.id, not null)
- group_id: bigint (foreign key to groups.id, on delete cascade)
- role: text (not null) - values: owner, member
- created_at: timestamp (default: now())
- unique constraint on (user_id, group_id); joins are upserts on this pair
"""
