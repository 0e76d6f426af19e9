from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Largest value an Integer column holds on SQLite and PostgreSQL BIGINT
MAX_DB_INT = 2**63 - 1
