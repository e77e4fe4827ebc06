"""Idempotent DDL for the users, study_plans and ai_requests tables."""

SCHEMA_SQL = """
CREATE EXTENSION IF NOT EXISTS pgcrypto;

CREATE TABLE IF NOT EXISTS users (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    email VARCHAR(255) NOT NULL UNIQUE,
    name VARCHAR(255) NOT NULL,
    password_hash VARCHAR(255) NOT NULL,
    total_tokens_used INTEGER NOT NULL DEFAULT 0,
    daily_tokens_used INTEGER NOT NULL DEFAULT 0,
    last_token_reset DATE,
    created_at TIMESTAMP NOT NULL DEFAULT now(),
    updated_at TIMESTAMP NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS study_plans (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    title VARCHAR(500) NOT NULL,
    description TEXT,
    prompt VARCHAR(255) NOT NULL,
    level VARCHAR(50) NOT NULL,
    selected_topics JSONB NOT NULL DEFAULT '[]'::jsonb,
    schedule JSONB NOT NULL,
    user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    created_at TIMESTAMP NOT NULL DEFAULT now(),
    updated_at TIMESTAMP NOT NULL DEFAULT now()
);

DO $$
BEGIN
    IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = 'ai_request_type') THEN
        CREATE TYPE ai_request_type AS ENUM ('generate_topics', 'generate_plan', 'refine_plan');
    END IF;
END
$$;

CREATE TABLE IF NOT EXISTS ai_requests (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    request_type ai_request_type NOT NULL,
    prompt TEXT NOT NULL,
    level VARCHAR(50) NOT NULL,
    tokens_used INTEGER NOT NULL,
    metadata JSONB,
    user_id UUID REFERENCES users(id) ON DELETE SET NULL,
    created_at TIMESTAMP NOT NULL DEFAULT now()
);
"""

INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_study_plans_user_id ON study_plans (user_id);
CREATE INDEX IF NOT EXISTS idx_study_plans_created_at ON study_plans (created_at);
CREATE INDEX IF NOT EXISTS idx_ai_requests_request_type ON ai_requests (request_type);
CREATE INDEX IF NOT EXISTS idx_ai_requests_user_id ON ai_requests (user_id);
CREATE INDEX IF NOT EXISTS idx_ai_requests_created_at ON ai_requests (created_at);
"""
