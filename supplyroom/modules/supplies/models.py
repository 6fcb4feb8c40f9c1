# Supabase table: supplies

"""
Expected Supabase table structure:

supplies:
- id: uuid (primary key)
- name: text (not null)
- quantity: numeric (not null, default: 0, check >= 0)
- cost: numeric (not null, default: 0, check >= 0) - unit cost
- sale_price: numeric (not null, default: 0, check >= 0) - unit sale price
- market_price: numeric (not null, default: 0, check >= 0) - reference price only
- tag_id: uuid (foreign key to tags.id, nullable, on delete set null)
- group_id: uuid (foreign key to groups.id, not null, on delete cascade)
- created_by: uuid (foreign key to auth.users.id, not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Profit is never stored; it is derived as (sale_price - cost) * quantity.
"""
