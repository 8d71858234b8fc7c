# Supabase tables: groups
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- name: text (not null)
- language: text (not null) - language practised at the table
- description: text (nullable)
- owner_id: uuid (foreign key to user_profiles.id, not null) - creator, holds the OWNER membership
- is_active: boolean (not null, default: true)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
