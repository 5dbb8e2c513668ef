# Tables touched by the admin user deletion, in deletion order
# The order follows the foreign keys: rows pointing at a user (or at rows the
# user owns) go before the rows they point at, and the auth account goes last.

"""
Cascade for one user id:

1. poll_votes.user_id          - votes cast by the user
2. comments.author_id          - comments written by the user
3. posts.author_id             - posts written by the user
4. group_memberships.user_id   - memberships of the user
5. groups.owner_id             - groups the user owns (their posts cascade in the store)
6. auth.users                  - auth.admin.delete_user(user_id)

There is no transaction: rows removed by earlier steps stay removed when a
later step fails.
"""
