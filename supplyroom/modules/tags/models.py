# Supabase table: tags

"""
Expected Supabase table structure:

tags:
- id: uuid (primary key)
- name: text (not null)
- color: text (not null, default: '#3B82F6')
- group_id: uuid (foreign key to groups.id, not null, on delete cascade)
- created_by: uuid (foreign key to auth.users.id, not null)
- created_at: timestamp (default: now())
"""
