# Supabase tables: groups, user_groups
# This file documents the expected database schema
# Actual operations go through the InventoryStore in supplyroom/database

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- created_by: uuid (foreign key to auth.users.id, not null) - owner/creator
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

user_groups:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null, on delete cascade)
- user_id: uuid (foreign key to auth.users.id, not null)
- role: text (not null, default: 'member') - values: admin, member
- created_at: timestamp (default: now())
- unique constraint on (group_id, user_id)

Row-level security lets a user read a group only through a user_groups row.
The service still checks membership itself so the rules hold on any store.
"""
