# homefix/schema.py
"""DDL for the managed backend, applied by the operator CLI."""

CHANGE_CHANNEL = "table_changes"

# Columns each table exposes to the data layer
TABLES = {
    "service_requests": {
        "id", "full_name", "mobile", "service_type", "issue_description",
        "preferred_time", "location", "is_different_address", "needs_parts",
        "part_type", "part_other", "needs_installation", "photo_urls",
        "status", "assigned_technician", "admin_notes", "created_at", "updated_at",
    },
    "technicians": {
        "id", "full_name", "phone", "skills", "location", "status",
        "profile_id", "created_at",
    },
    "profiles": {
        "id", "email", "full_name", "role", "password_hash",
        "created_at", "updated_at",
    },
    "parts_catalog": {
        "id", "name", "description", "category", "is_active",
    },
    "reviews": {
        "id", "request_id", "technician_id", "rating", "satisfaction_level",
        "comment", "created_at",
    },
}

PROFILES_TABLE = """
CREATE TABLE IF NOT EXISTS public.profiles (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    email TEXT NOT NULL UNIQUE,
    full_name TEXT,
    role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('admin', 'technician', 'user')),
    password_hash TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

# request.jwt.claim.sub is the session subject set by the backend's REST gateway
PROFILES_POLICIES = """
ALTER TABLE public.profiles ENABLE ROW LEVEL SECURITY;

DROP POLICY IF EXISTS "Public profiles are viewable by everyone" ON public.profiles;
CREATE POLICY "Public profiles are viewable by everyone"
    ON public.profiles
    FOR SELECT
    USING (true);

DROP POLICY IF EXISTS "Users can update their own profile" ON public.profiles;
CREATE POLICY "Users can update their own profile"
    ON public.profiles
    FOR UPDATE
    USING (NULLIF(current_setting('request.jwt.claim.sub', true), '')::uuid = id);
"""

TECHNICIANS_TABLE = """
CREATE TABLE IF NOT EXISTS public.technicians (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    full_name TEXT NOT NULL,
    phone TEXT NOT NULL,
    skills TEXT[] NOT NULL DEFAULT '{}',
    location JSONB NOT NULL,
    status TEXT NOT NULL DEFAULT 'available' CHECK (status IN ('available', 'busy', 'offline')),
    profile_id UUID REFERENCES public.profiles (id) ON DELETE SET NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

PARTS_CATALOG_TABLE = """
CREATE TABLE IF NOT EXISTS public.parts_catalog (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    category TEXT NOT NULL,
    is_active BOOLEAN NOT NULL DEFAULT TRUE
);
"""

SERVICE_REQUESTS_TABLE = """
CREATE TABLE IF NOT EXISTS public.service_requests (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    full_name TEXT NOT NULL,
    mobile TEXT NOT NULL,
    service_type TEXT NOT NULL,
    issue_description TEXT NOT NULL,
    preferred_time TEXT NOT NULL,
    location JSONB NOT NULL,
    is_different_address BOOLEAN NOT NULL DEFAULT FALSE,
    needs_parts BOOLEAN NOT NULL DEFAULT FALSE,
    part_type TEXT,
    part_other TEXT,
    needs_installation BOOLEAN NOT NULL DEFAULT FALSE,
    photo_urls TEXT[] NOT NULL DEFAULT '{}',
    status TEXT NOT NULL DEFAULT 'pending',
    assigned_technician UUID REFERENCES public.technicians (id),
    admin_notes TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

REVIEWS_TABLE = """
CREATE TABLE IF NOT EXISTS public.reviews (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    request_id UUID NOT NULL REFERENCES public.service_requests (id),
    technician_id UUID REFERENCES public.technicians (id),
    rating INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
    satisfaction_level TEXT NOT NULL,
    comment TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

CHANGE_FEED_TRIGGER = f"""
CREATE OR REPLACE FUNCTION public.notify_table_change() RETURNS trigger AS $$
DECLARE
    row_id UUID;
BEGIN
    IF TG_OP = 'DELETE' THEN
        row_id := OLD.id;
    ELSE
        row_id := NEW.id;
    END IF;
    PERFORM pg_notify(
        '{CHANGE_CHANNEL}',
        json_build_object(
            'table', TG_TABLE_NAME,
            'type', CASE TG_OP WHEN 'INSERT' THEN 'created'
                               WHEN 'UPDATE' THEN 'updated'
                               ELSE 'deleted' END,
            'id', row_id
        )::text
    );
    RETURN NULL;
END;
$$ LANGUAGE plpgsql;

DROP TRIGGER IF EXISTS service_requests_changes ON public.service_requests;
CREATE TRIGGER service_requests_changes
    AFTER INSERT OR UPDATE OR DELETE ON public.service_requests
    FOR EACH ROW EXECUTE FUNCTION public.notify_table_change();
"""

FULL_SCHEMA = [
    PROFILES_TABLE,
    PROFILES_POLICIES,
    TECHNICIANS_TABLE,
    PARTS_CATALOG_TABLE,
    SERVICE_REQUESTS_TABLE,
    REVIEWS_TABLE,
    CHANGE_FEED_TRIGGER,
]
