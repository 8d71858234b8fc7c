# Supabase tables: group_members, user_profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in repository.py

"""
Expected Supabase table structure:

group_members:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null, on delete cascade)
- user_id: uuid (foreign key to user_profiles.id, not null)
- role: text (not null, default: 'LISTENER') - values: OWNER, SPEAKER, LISTENER
- seat_position: smallint (nullable)
    null   -> unseated
    0..9   -> seated at that table seat
    -1..-10 -> requesting seat (abs(value) - 1)
- is_admin: boolean (not null, default: false)
- is_muted: boolean (not null, default: false)
- is_deafened: boolean (not null, default: false)
- joined_at: timestamp (default: now())
- unique constraint on (group_id, user_id)
- check constraint seat_position between -10 and 9
- unique index group_members_seat_key on (group_id, seat_position)
  where seat_position >= 0

user_profiles:
- id: uuid (primary key, references auth.users.id)
- username: text (unique, not null)
- email: text (unique, not null) - synced from auth.users
- nationality: text (nullable)
- native_language: text (nullable)
- target_language: text (nullable)
- created_at: timestamp (default: now())

The partial unique index makes seat assignment a conditional write: a second
writer targeting an occupied seat fails with 23505 (unique_violation).
"""
