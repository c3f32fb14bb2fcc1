from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

# Nested document column: JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests).
DocumentType = JSON().with_variant(JSONB(), "postgresql")
